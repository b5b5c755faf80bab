"""Tests for the prompt digest."""

from rimtranslator.translation.hashing import prompt_digest


class TestPromptDigest:
    def test_deterministic(self):
        assert prompt_digest("hello") == prompt_digest("hello")

    def test_known_value(self):
        assert prompt_digest("") == (
            "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
        )

    def test_fixed_length_hex(self):
        for text in ["", "a", "x" * 10_000, "Agradable jornada de pesca ñ 漢字"]:
            digest = prompt_digest(text)
            assert len(digest) == 64
            assert digest.isalnum()
            assert digest == digest.lower()

    def test_different_inputs_differ(self):
        assert prompt_digest("Language: 'French'") != prompt_digest("Language: 'German'")
