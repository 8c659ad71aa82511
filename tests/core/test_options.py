"""
Tests for GenerationOptions and PromptConfig.
"""

from unittest.mock import MagicMock

from llmkit import GenerationOptions, PromptConfig


class TestGenerationOptions:
    def test_nothing_set_by_default(self):
        options = GenerationOptions()
        assert not options.is_set("temperature")
        assert not options.is_set("stop_sequences")

    def test_merged_overrides_win(self):
        defaults = GenerationOptions(temperature=0.1, max_tokens=100)
        merged = defaults.merged(GenerationOptions(temperature=0.9, seed=3))
        assert merged.temperature == 0.9
        assert merged.max_tokens == 100
        assert merged.seed == 3

    def test_merged_with_none(self):
        defaults = GenerationOptions(top_p=0.5)
        assert defaults.merged(None) is defaults

    def test_unset_override_does_not_clear(self):
        defaults = GenerationOptions(stop_sequences=["END"])
        assert defaults.merged(GenerationOptions()).stop_sequences == ["END"]


class TestFromEnv:
    def test_reads_prefixed_variables(self):
        env = {
            "LLMKIT_TEMPERATURE": "0.7",
            "LLMKIT_TOP_K": "40",
            "LLMKIT_MAX_TOKENS": "512",
            "LLMKIT_REASONING_EFFORT": "high",
        }
        options = GenerationOptions.from_env(env)
        assert options.temperature == 0.7
        assert options.top_k == 40
        assert options.max_tokens == 512
        assert options.reasoning_effort == "high"
        assert options.seed is None

    def test_unparsable_values_ignored(self):
        options = GenerationOptions.from_env({"LLMKIT_SEED": "abc", "LLMKIT_TOP_P": ""})
        assert options.seed is None
        assert options.top_p is None

    def test_empty_environment(self):
        assert GenerationOptions.from_env({}) == GenerationOptions()


class TestPromptConfig:
    def test_session_created_lazily_and_reused(self):
        config = PromptConfig()
        session = config.get_session()
        assert session is config.get_session()

    def test_caller_session_used(self):
        session = MagicMock()
        assert PromptConfig(session=session).get_session() is session
