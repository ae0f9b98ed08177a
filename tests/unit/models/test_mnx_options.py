"""Unit tests for the mnx memory-control object."""

import pytest
from pydantic import ValidationError

from mnexium.models.mnx import MnxOptions, coerce_mnx


class TestMnxValidation:
    """Tests for identifier requirements."""

    @pytest.mark.parametrize(
        "options",
        [
            {"learn": "force"},
            {"recall": True},
            {"history": True, "chat_id": "c1"},
            {"state": {"key": "task"}},
        ],
    )
    def test_subject_required(self, options: dict) -> None:
        """Features that read or write per-subject data need subject_id."""
        with pytest.raises(ValidationError, match="subject_id"):
            MnxOptions.model_validate(options)

    def test_history_needs_chat_id(self) -> None:
        with pytest.raises(ValidationError, match="chat_id"):
            MnxOptions(subject_id="u1", history=True)

    def test_log_and_plain_learn_allowed_without_subject(self) -> None:
        """Logging and opportunistic learning alone are accepted."""
        options = MnxOptions(log=True, learn=True)

        assert options.to_wire() == {"log": True, "learn": True}

    def test_state_without_load(self) -> None:
        options = MnxOptions(state={"key": "task", "load": False})

        assert options.to_wire() == {"state": {"load": False, "key": "task"}}

    def test_invalid_summarize_preset(self) -> None:
        with pytest.raises(ValidationError):
            MnxOptions(summarize="extreme")

    def test_summarize_config_bounds(self) -> None:
        with pytest.raises(ValidationError):
            MnxOptions(
                summarize_config={
                    "start_at_tokens": 0,
                    "chunk_size": 100,
                    "keep_recent_messages": 2,
                    "summary_target": 50,
                }
            )


class TestWireForm:
    """Tests for to_wire and coerce_mnx."""

    def test_unset_fields_omitted(self) -> None:
        options = MnxOptions(subject_id="u1", chat_id="c1", recall=True, log=False)

        assert options.to_wire() == {
            "subject_id": "u1",
            "chat_id": "c1",
            "log": False,
            "recall": True,
        }

    def test_unknown_fields_passed_through(self) -> None:
        """New service flags can be used before the client knows them."""
        wire = coerce_mnx({"subject_id": "u1", "new_flag": 1})

        assert wire == {"subject_id": "u1", "new_flag": 1}

    def test_system_prompt_forms(self) -> None:
        assert coerce_mnx({"system_prompt": False}) == {"system_prompt": False}
        assert coerce_mnx({"system_prompt": "prompt_1"}) == {"system_prompt": "prompt_1"}

    def test_none(self) -> None:
        assert coerce_mnx(None) is None

    def test_model_instance(self) -> None:
        assert coerce_mnx(MnxOptions(subject_id="u1", learn="force")) == {
            "subject_id": "u1",
            "learn": "force",
        }
