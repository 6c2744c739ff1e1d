"""
요청자 인증

호스팅 인증 서비스(Supabase 등)가 발급한 Bearer JWT를 검증하고
사용자 ID(sub 클레임)를 꺼냅니다. 토큰이 없거나 유효하지 않으면 401.
"""

import logging
from typing import Optional

import jwt
from fastapi import Header, HTTPException, Request

from config.settings import AuthConfig

logger = logging.getLogger(__name__)


def decode_user_id(token: str, auth_config: AuthConfig) -> str:
    """
    JWT에서 사용자 ID 추출

    Raises:
        HTTPException(401): 만료/서명 오류/사용자 ID 없음
    """
    if not auth_config.jwt_secret_key:
        logger.error("[auth] JWT secret is not configured")
        raise HTTPException(status_code=401, detail="Unauthorized")

    options = {} if auth_config.jwt_audience else {"verify_aud": False}
    try:
        claims = jwt.decode(
            token,
            auth_config.jwt_secret_key,
            algorithms=[auth_config.jwt_algorithm],
            audience=auth_config.jwt_audience,
            options=options,
        )
    except jwt.ExpiredSignatureError:
        logger.info("[auth] token has expired")
        raise HTTPException(status_code=401, detail="Token has expired")
    except jwt.InvalidTokenError as e:
        logger.info("[auth] invalid token: %s", e)
        raise HTTPException(status_code=401, detail="Invalid token")

    user_id = claims.get("sub") or claims.get("user_id")
    if not user_id:
        logger.info("[auth] token missing sub claim")
        raise HTTPException(status_code=401, detail="Unauthorized")
    return str(user_id)


def get_current_user_id(
    request: Request,
    authorization: Optional[str] = Header(default=None),
) -> str:
    """FastAPI 의존성: Authorization 헤더에서 사용자 ID 반환"""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Unauthorized")

    token = authorization.split(" ", 1)[1].strip()
    return decode_user_id(token, request.app.state.settings.auth)
