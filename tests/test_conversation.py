"""
Conversation loop tests: alternation, early stop, state machine
"""
import asyncio

import pytest

from conftest import FakePlayer
from spar.models import Turn
from spar.services.conversation import (
    ConversationLoop,
    ConversationState,
    parse_exchange_count
)

TOPIC = "Is pineapple on pizza acceptable?"


@pytest.fixture
def make_loop(make_executor, paths, console):
    def _make(scripts, **kwargs):
        executor = make_executor(scripts, **kwargs)
        return ConversationLoop(executor, audio_dir=paths.get_path("audio"), console=console)
    return _make


def run_loop(loop, exchanges, topic=TOPIC):
    loop.set_topic(topic)
    loop.set_exchanges(exchanges)
    return asyncio.run(loop.run())


class TestAlternation:
    def test_two_exchanges(self, make_loop):
        loop = make_loop([["m1"], ["b1"], ["m2"], ["b2"]])
        result = run_loop(loop, 2)

        entries = result.transcript.entries()
        assert [e.speaker for e in entries] == [None, "Maverick", "Blaze", "Maverick", "Blaze"]
        assert [e.text for e in entries] == [TOPIC, "m1", "b1", "m2", "b2"]
        assert result.rounds_completed == 2
        assert not result.halted
        assert loop.state == ConversationState.ENDED

    def test_second_persona_sees_latest_reply_last(self, make_loop):
        loop = make_loop([["m1"], ["b1"], ["m2"], ["b2"]])
        run_loop(loop, 2)
        blaze_round_two = loop.executor.llm.calls[3]["messages"]
        assert blaze_round_two[-1] == {"role": "user", "content": "m2"}

    def test_audio_files_reported(self, make_loop, paths, console):
        loop = make_loop([["m1"], ["b1"]])
        result = run_loop(loop, 1)
        assert len(result.audio_files) == 2
        assert result.audio_dir == paths.get_path("audio")
        output = console.file.getvalue()
        assert "--- Conversation Ended ---" in output
        assert str(paths.get_path("audio")) in output


class TestEarlyStop:
    def test_second_persona_failure_halts(self, make_loop):
        loop = make_loop([["m1"], RuntimeError("boom"), ["m2"], ["b2"]])
        result = run_loop(loop, 3)

        assert result.halted
        assert result.rounds_completed == 0
        assert [e.text for e in result.transcript.entries()] == [TOPIC, "m1"]
        assert len(loop.executor.llm.calls) == 2
        assert loop.state == ConversationState.ENDED

    def test_second_persona_empty_reply_halts(self, make_loop):
        loop = make_loop([["m1"], ["b1"], ["m2"], []])
        result = run_loop(loop, 5)

        assert result.halted
        assert result.rounds_completed == 1
        assert [e.text for e in result.transcript.entries()] == [TOPIC, "m1", "b1", "m2"]
        assert len(loop.executor.llm.calls) == 4

    def test_first_persona_failure_is_recorded_and_round_continues(self, make_loop):
        loop = make_loop([["m1"], ["b1"], RuntimeError("boom"), ["b2"]])
        result = run_loop(loop, 2)

        assert not result.halted
        assert result.rounds_completed == 2
        texts = [e.text for e in result.transcript.entries()]
        assert texts == [TOPIC, "m1", "b1", "[Maverick failed to respond due to an error]", "b2"]

    def test_first_persona_empty_reply_recorded_as_failure(self, make_loop):
        loop = make_loop([[], ["b1"]])
        result = run_loop(loop, 1)
        assert result.transcript.entries()[1].text == Turn.failure(loop.registry.first).text


class TestBestEffortVoice:
    def test_voice_failure_does_not_change_text_or_halt(self, make_loop):
        loop = make_loop([["m1"], ["b1"], ["m2"], ["b2"]], player=FakePlayer(error=OSError("busy")))
        result = run_loop(loop, 2)
        assert not result.halted
        assert [e.text for e in result.transcript.turns()] == ["m1", "b1", "m2", "b2"]


class TestStateMachine:
    def test_initial_state(self, make_loop):
        assert make_loop([]).state == ConversationState.AWAITING_TOPIC

    def test_transitions(self, make_loop):
        loop = make_loop([])
        loop.set_topic(TOPIC)
        assert loop.state == ConversationState.AWAITING_EXCHANGE_COUNT
        loop.set_exchanges(3)
        assert loop.state == ConversationState.RUNNING
        assert loop.max_rounds == 3

    def test_run_before_setup_rejected(self, make_loop):
        with pytest.raises(RuntimeError):
            asyncio.run(make_loop([]).run())

    def test_exchanges_before_topic_rejected(self, make_loop):
        with pytest.raises(RuntimeError):
            make_loop([]).set_exchanges(2)

    def test_blank_topic_rejected(self, make_loop):
        loop = make_loop([])
        with pytest.raises(ValueError):
            loop.set_topic("  ")
        assert loop.state == ConversationState.AWAITING_TOPIC

    def test_cannot_rerun(self, make_loop):
        loop = make_loop([["m1"], ["b1"]])
        run_loop(loop, 1)
        with pytest.raises(RuntimeError):
            asyncio.run(loop.run())


class TestParseExchangeCount:
    @pytest.mark.parametrize("raw,expected", [
        ("3", 3),
        (" 7 ", 7),
        ("4 rounds", 4),
        ("", 5),
        (None, 5),
        ("lots", 5),
        ("0", 5),
        ("-2", 5),
    ])
    def test_parse(self, raw, expected):
        assert parse_exchange_count(raw) == expected

    def test_custom_default(self):
        assert parse_exchange_count("nope", default=8) == 8
