"""Tests for the diff reviewer and the multi-turn chat loop."""

import pytest

from conftest import make_client
from structagent.chat import Conversation, chat_loop, take_turn
from structagent.git import DiffSummary
from structagent.llm import LLM
from structagent.review import REVIEW_SYSTEM_PROMPT, build_review_prompt, review_changes


@pytest.mark.asyncio
async def test_review_sends_diff():
    client = make_client("  LGTM!  ")
    summary = DiffSummary(files=["a.py"], changes="a.py (1 additions, 0 deletions)")
    assert await review_changes(LLM(client), summary, "review-model") == "LGTM!"

    kwargs = client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "review-model"
    assert kwargs["messages"][0] == {"role": "system", "content": REVIEW_SYSTEM_PROMPT}
    assert "a.py (1 additions, 0 deletions)" in kwargs["messages"][1]["content"]


@pytest.mark.asyncio
async def test_review_without_changes_skips_request():
    client = make_client()
    out = await review_changes(LLM(client), DiffSummary(files=[], changes=""), "m")
    assert out.startswith("LGTM!")
    client.chat.completions.create.assert_not_called()


def test_review_prompt_mentions_lgtm():
    assert 'respond with "LGTM!"' in build_review_prompt("x")


@pytest.mark.asyncio
async def test_llm_errors_propagate():
    client = make_client()
    client.chat.completions.create.side_effect = RuntimeError("service down")
    with pytest.raises(RuntimeError, match="service down"):
        await LLM(client).generate_text("hi", "m")


def test_conversation_is_immutable():
    start = Conversation.start("  be brief ")
    after = start.with_message("user", "hi")
    assert len(start) == 1
    assert after.as_messages() == [
        {"role": "system", "content": "be brief"},
        {"role": "user", "content": "hi"},
    ]


@pytest.mark.asyncio
async def test_take_turn_sends_history():
    client = make_client("first", "second")
    llm = LLM(client)
    convo = Conversation.start("sys")
    reply, convo = await take_turn(llm, "m", convo, "one")
    reply2, convo = await take_turn(llm, "m", convo, "two")

    assert (reply, reply2) == ("first", "second")
    sent = client.chat.completions.create.call_args.kwargs["messages"]
    assert [m["role"] for m in sent] == ["system", "user", "assistant", "user"]
    assert [m.role for m in convo.messages][-1] == "assistant"


@pytest.mark.asyncio
async def test_chat_loop_exits_on_exit_word():
    answers = iter(["hello", "", "EXIT", "never read"])
    shown = []

    async def ask(prompt):
        return next(answers)

    convo = await chat_loop(LLM(make_client("hi there")), "m", ask, show=shown.append)
    assert shown == ["hi there"]
    assert [m.content for m in convo.messages] == ["hello", "hi there"]


@pytest.mark.asyncio
async def test_chat_loop_exits_on_eof():
    async def ask(prompt):
        raise EOFError

    convo = await chat_loop(LLM(make_client()), "m", ask, system_prompt="s")
    assert len(convo) == 1
