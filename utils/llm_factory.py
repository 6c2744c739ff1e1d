"""
LLM Factory - LLM 생성 로직 중앙화

모든 LLM 인스턴스는 이 factory를 통해 생성됩니다.
- OpenAI API
- vLLM (OpenAI compatible API)
- Ollama

사용 예:
    from config import get_settings
    from utils.llm_factory import create_llm

    llm = create_llm(get_settings().llm, temperature=0.3)
"""

import logging
from typing import Any, List, Optional

from langchain.chat_models import init_chat_model

from config.settings import LangfuseConfig, LLMConfig

logger = logging.getLogger(__name__)


def create_llm(
    llm_config: LLMConfig,
    model_name: Optional[str] = None,
    temperature: Optional[float] = None,
):
    """
    중앙화된 LLM 생성 함수

    llm_config.llm_provider 값에 따라 적절한 LLM을 생성합니다.

    Args:
        llm_config: LLM 설정
        model_name: 모델 이름 (None이면 설정의 기본값 사용)
        temperature: Temperature 설정 (None이면 설정의 기본값 사용)

    Returns:
        LangChain ChatModel 인스턴스

    Examples:
        # 기본 설정 사용
        llm = create_llm(settings.llm)

        # vLLM 사용 (.env에서 LLM_PROVIDER=vllm 설정)
        llm = create_llm(settings.llm, model_name="meta-llama/Llama-3-8b-chat-hf")
    """
    model = model_name or llm_config.llm_model_name
    temp = temperature if temperature is not None else llm_config.llm_temperature

    provider = llm_config.llm_provider

    logger.info("[llm] Creating LLM: provider=%s, model=%s, temperature=%s", provider, model, temp)

    if provider == "openai":
        return init_chat_model(
            model=model,
            model_provider="openai",
            api_key=llm_config.openai_api_key,
            temperature=temp,
        )

    elif provider == "vllm":
        # vLLM은 OpenAI compatible API를 제공
        base_url = llm_config.vllm_base_url

        # URL에 http:// 또는 https:// 없으면 추가
        if not base_url.startswith(("http://", "https://")):
            base_url = f"http://{base_url}"

        logger.info("[llm] vLLM base_url: %s", base_url)

        return init_chat_model(
            model=model,
            model_provider="openai",  # OpenAI compatible
            base_url=base_url,
            api_key=llm_config.vllm_api_key,
            temperature=temp,
        )

    elif provider == "ollama":
        return init_chat_model(
            model=model,
            model_provider="ollama",
            base_url=llm_config.ollama_base_url,
            temperature=temp,
        )

    else:
        raise ValueError(
            f"Unsupported LLM provider: {provider}. "
            f"Supported providers: 'openai', 'vllm', 'ollama'"
        )


def create_llm_callbacks(langfuse_config: LangfuseConfig) -> List[Any]:
    """
    LLM 호출 추적용 콜백 생성

    Langfuse 키가 설정된 경우에만 CallbackHandler를 반환합니다.
    """
    if not langfuse_config.enabled:
        return []

    from langfuse import Langfuse
    from langfuse.langchain import CallbackHandler

    # Langfuse singleton 초기화 (CallbackHandler가 사용)
    Langfuse(
        public_key=langfuse_config.langfuse_public_key,
        secret_key=langfuse_config.langfuse_secret_key,
        host=langfuse_config.langfuse_base_url,
    )
    logger.info("[llm] Langfuse tracing enabled")
    return [CallbackHandler()]
