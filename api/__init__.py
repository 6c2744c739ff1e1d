"""FastAPI 엔드포인트 패키지"""
