from unittest.mock import MagicMock, patch

import pytest
import requests

from interview_coach.errors import UpstreamTimeoutError, UpstreamUnavailableError
from interview_coach.llm.prompt_builder import build_feedback_prompt
from interview_coach.services.llm_service import OpenRouterGateway


def fake_response(status_code=200, body=None, text=""):
    r = MagicMock()
    r.status_code = status_code
    r.text = text
    if isinstance(body, Exception):
        r.json.side_effect = body
    else:
        r.json.return_value = body
    return r


def make_gateway(**kwargs):
    return OpenRouterGateway("test-key", url="https://llm.test/v1/chat/completions", model="test-model", **kwargs)


def test_complete_returns_message_content():
    body = {"choices": [{"message": {"role": "assistant", "content": '{"score": 8}'}}]}
    with patch("interview_coach.services.llm_service.requests.post", return_value=fake_response(body=body)) as post:
        assert make_gateway(timeout=5).complete("prompt text") == '{"score": 8}'

    args, kwargs = post.call_args
    assert args[0] == "https://llm.test/v1/chat/completions"
    assert kwargs["timeout"] == 5
    assert kwargs["headers"]["Authorization"] == "Bearer test-key"
    assert kwargs["json"]["model"] == "test-model"
    assert kwargs["json"]["messages"] == [{"role": "user", "content": "prompt text"}]


def test_missing_key_fails_without_calling_provider():
    with patch("interview_coach.services.llm_service.requests.post") as post:
        with pytest.raises(UpstreamUnavailableError):
            OpenRouterGateway(None).complete("prompt")
    post.assert_not_called()
    assert OpenRouterGateway(None).configured is False


def test_timeout_maps_to_timeout_error():
    with patch("interview_coach.services.llm_service.requests.post", side_effect=requests.exceptions.Timeout()):
        with pytest.raises(UpstreamTimeoutError):
            make_gateway().complete("prompt")


def test_connection_error_maps_to_unavailable():
    with patch("interview_coach.services.llm_service.requests.post", side_effect=requests.exceptions.ConnectionError("refused")):
        with pytest.raises(UpstreamUnavailableError):
            make_gateway().complete("prompt")


@pytest.mark.parametrize("response", [
    fake_response(status_code=401, text="bad key"),
    fake_response(status_code=502, text="bad gateway"),
    fake_response(body=ValueError("not json"), text="<html>"),
    fake_response(body={"choices": []}),
    fake_response(body={"error": {"message": "quota"}}),
])
def test_bad_provider_replies_map_to_unavailable(response):
    with patch("interview_coach.services.llm_service.requests.post", return_value=response):
        with pytest.raises(UpstreamUnavailableError):
            make_gateway().complete("prompt")


def test_prompt_carries_question_answer_and_schema():
    prompt = build_feedback_prompt("Tell me about a challenge you overcame", "Um, well, I fixed a bug")
    assert 'Interview Question: "Tell me about a challenge you overcame"' in prompt
    assert 'Candidate Response: "Um, well, I fixed a bug"' in prompt
    for field in ("tone", "fillerWords", "grammarIssues", "relevance", "score", "suggestions", "followUp"):
        assert f'"{field}"' in prompt
