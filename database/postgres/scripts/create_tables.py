from config import get_settings
from database.postgres.core.connection import create_db_engine, init_db

def create_db_tables():
    database_config = get_settings().database
    engine = create_db_engine(database_config.database_url, echo=database_config.database_echo)
    init_db(engine)
    engine.dispose()
    print("Database tables created successfully.")

if __name__ == "__main__":
    create_db_tables()
