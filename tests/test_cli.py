"""Tests for the terminal client in sentiment_client.py."""

import asyncio
import io
from unittest.mock import patch

import pytest
from rich.console import Console

import sentiment_client
from sentiment_client import (
    format_confidence, handle_command, main, render_history, render_result, run_once,
)
from sentiment_core.core.controller import RequestController
from sentiment_core.models import AnalysisResult, EXAMPLE_TEXTS, TRANSPORT_MESSAGE
from conftest import FakeTransport, success_body


class ContextFakeTransport(FakeTransport):
    """FakeTransport usable in place of PredictTransport(api_url, timeout=...)"""

    instances = []

    def __init__(self, api_url=None, timeout=None, responses=()):
        super().__init__(*responses)
        self.api_url = api_url
        self.timeout = timeout
        ContextFakeTransport.instances.append(self)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return None


def make_console():
    return Console(file=io.StringIO(), width=120, force_terminal=False)


def output(console):
    return console.file.getvalue()


def test_format_confidence():
    assert format_confidence(0.92) == '92.0%'
    assert format_confidence(1) == '100.0%'
    assert format_confidence(0.0456) == '4.6%'


def test_render_result():
    console = make_console()
    console.print(render_result(AnalysisResult.from_payload(success_body()['data'])))
    text = output(console)
    assert 'Positive' in text
    assert '92.0%' in text
    assert '15 ms' in text
    assert 'lstm' in text


def test_render_history():
    controller = RequestController(FakeTransport(success_body(model='rnn', time_ms=9)))
    controller.set_text('x' * 60)
    asyncio.run(controller.submit())

    table = render_history(controller.history)

    assert table.row_count == 1
    console = make_console()
    console.print(table)
    assert 'RNN' in output(console)
    assert '9ms' in output(console)


class TestCommands:

    @pytest.fixture
    def controller(self):
        return RequestController(FakeTransport())

    def test_quit(self, controller):
        assert handle_command(controller, make_console(), ':quit') is False

    def test_model(self, controller):
        console = make_console()
        assert handle_command(controller, console, ':model rnn') is True
        assert controller.selected_model == 'rnn'
        assert 'RNN' in output(console)

    def test_bad_model(self, controller):
        console = make_console()
        handle_command(controller, console, ':model gru')
        assert controller.selected_model == 'lstm'
        assert 'Unknown model' in output(console)

    def test_example(self, controller):
        handle_command(controller, make_console(), ':example 3')
        assert controller.input_text == EXAMPLE_TEXTS[2]

    @pytest.mark.parametrize('line', [':example', ':example 0', ':example 4', ':example two'])
    def test_bad_example(self, controller, line):
        console = make_console()
        handle_command(controller, console, line)
        assert controller.input_text == ''
        assert 'Usage' in output(console)

    def test_clear(self, controller):
        controller.set_text('something')
        handle_command(controller, make_console(), ':clear')
        assert controller.input_text == ''

    def test_empty_history(self, controller):
        console = make_console()
        handle_command(controller, console, ':history')
        assert 'No analyses yet' in output(console)

    def test_unknown(self, controller):
        console = make_console()
        assert handle_command(controller, console, ':dance') is True
        assert 'Unknown command' in output(console)


def test_run_once_success():
    controller = RequestController(FakeTransport(success_body()))
    console = make_console()
    assert asyncio.run(run_once(controller, console, "Great film!")) == 0
    assert 'Positive' in output(console)


def test_run_once_blank():
    transport = FakeTransport()
    controller = RequestController(transport)
    console = make_console()
    assert asyncio.run(run_once(controller, console, "   ")) == 1
    assert transport.calls == []
    assert 'Please enter some text to analyze' in output(console)


def test_main_one_shot():
    ContextFakeTransport.instances = []
    with patch.object(sentiment_client, 'PredictTransport', ContextFakeTransport):
        code = main(['--text', 'Great film!', '--model', 'rnn', '--api-url', 'http://backend:9000',
                     '--timeout', '5'])

    assert code == 0
    transport = ContextFakeTransport.instances[0]
    assert transport.api_url == 'http://backend:9000'
    assert transport.timeout == 5.0
    assert transport.calls[0].model == 'rnn'


def test_main_one_shot_transport_failure(unreachable, capsys):
    def factory(api_url=None, timeout=None):
        return ContextFakeTransport(api_url, timeout, responses=[unreachable])

    with patch.object(sentiment_client, 'PredictTransport', factory):
        code = main(['--text', 'Great film!'])

    assert code == 1
    assert TRANSPORT_MESSAGE in capsys.readouterr().out


def test_main_bad_config(monkeypatch):
    monkeypatch.setenv('SENTIMENT_TIMEOUT', 'forever')
    assert main(['--text', 'hi']) == 2
