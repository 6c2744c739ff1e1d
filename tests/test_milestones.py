"""
마일스톤 생성 / 검증 / 기본 마일스톤 대체 테스트
"""

import pytest

from services.exceptions import MilestoneGenerationError
from services.milestones import (
    LLMMilestoneGenerator,
    MilestonePlan,
    fallback_milestones,
    resolve_milestones,
    validate_milestones,
)
from tests.helpers import (
    FailingMilestoneGenerator,
    SlowMilestoneGenerator,
    StaticMilestoneGenerator,
)


class FakeStructuredLLM:
    """with_structured_output() 결과를 흉내내는 객체"""

    def __init__(self, result):
        self.result = result
        self.messages = None
        self.config = None

    async def ainvoke(self, messages, config=None):
        self.messages = messages
        self.config = config
        return self.result


class FakeChatModel:
    def __init__(self, result):
        self.structured = FakeStructuredLLM(result)
        self.schema = None

    def with_structured_output(self, schema):
        self.schema = schema
        return self.structured


@pytest.mark.unit
def test_fallback_milestones_are_derived_from_title():
    assert fallback_milestones("Learn piano") == [
        'Define what "Learn piano" means specifically.',
        'Identify first step for "Learn piano".',
        'Schedule time to work on "Learn piano".',
    ]


@pytest.mark.unit
def test_validate_milestones_strips_text():
    assert validate_milestones(["  one ", "two", "three"]) == ["one", "two", "three"]


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw",
    [
        ["only", "two"],
        ["1", "2", "3", "4", "5", "6"],
        ["ok", "   ", "ok"],
        ["ok", "ok", "x" * 201],
        "not a list",
        None,
        {"steps": ["a", "b", "c"]},
    ],
)
def test_validate_milestones_rejects_malformed_output(raw):
    with pytest.raises(MilestoneGenerationError):
        validate_milestones(raw)


@pytest.mark.unit
def test_validate_milestones_accepts_plan_and_dict():
    plan = MilestonePlan(milestones=["a", "b", "c"])

    assert validate_milestones(plan) == ["a", "b", "c"]
    assert validate_milestones({"milestones": ["a", "b", "c", "d"]}) == ["a", "b", "c", "d"]


@pytest.mark.asyncio
async def test_resolve_without_generator_uses_fallback():
    assert await resolve_milestones(None, "Read more", timeout=1.0) == fallback_milestones("Read more")


@pytest.mark.asyncio
async def test_resolve_uses_generated_milestones():
    generator = StaticMilestoneGenerator(["Buy shoes", "Run 5k", "Run 10k", "Run a half"])

    result = await resolve_milestones(generator, "Run a marathon", timeout=1.0)

    assert result == ["Buy shoes", "Run 5k", "Run 10k", "Run a half"]
    assert generator.calls == ["Run a marathon"]


@pytest.mark.asyncio
async def test_resolve_falls_back_on_exception():
    result = await resolve_milestones(FailingMilestoneGenerator(), "Read more", timeout=1.0)

    assert result == fallback_milestones("Read more")


@pytest.mark.asyncio
async def test_resolve_falls_back_on_timeout():
    result = await resolve_milestones(SlowMilestoneGenerator(), "Read more", timeout=0.05)

    assert result == fallback_milestones("Read more")


@pytest.mark.asyncio
async def test_resolve_falls_back_on_malformed_output():
    result = await resolve_milestones(StaticMilestoneGenerator(["just one"]), "Read more", timeout=1.0)

    assert result == fallback_milestones("Read more")


@pytest.mark.asyncio
async def test_llm_generator_uses_structured_output():
    llm = FakeChatModel(MilestonePlan(milestones=["Pick a plan", "Run twice a week", "Race day"]))
    callbacks = [object()]
    generator = LLMMilestoneGenerator(llm, callbacks=callbacks)

    result = await generator.generate("Run a 10k")

    assert result == ["Pick a plan", "Run twice a week", "Race day"]
    assert llm.schema is MilestonePlan
    assert 'Based on the user goal "Run a 10k"' in llm.structured.messages[1]["content"]
    assert llm.structured.config == {"callbacks": callbacks}


@pytest.mark.asyncio
async def test_llm_generator_rejects_malformed_structured_output():
    llm = FakeChatModel({"milestones": []})
    generator = LLMMilestoneGenerator(llm)

    with pytest.raises(MilestoneGenerationError):
        await generator.generate("Run a 10k")
