import json

import pytest

from helpers import FakeFetcher, fake_fetchers, make_item, run
from socials.commands import CommandInterpreter, parse_int, tokenize
from socials.models import CycleState


@pytest.mark.parametrize(
    "line, expected",
    [
        ('+ "raspberry pi" rust', ["+", "raspberry pi", "rust"]),
        ('+hn"python"', ["+hn", "python"]),
        ("-reddit 'two words'", ["-reddit", "two words"]),
        ("   ", []),
        ('set default "my settings.json"', ["set", "default", "my settings.json"]),
        ("+ don't", ["+", "don't"]),
        ("save my'file.json", ["save", "my'file.json"]),
    ],
)
def test_tokenize(line, expected):
    assert tokenize(line) == expected


def test_parse_int_leading_number():
    assert parse_int("12abc") == 12
    assert parse_int("abc") is None
    assert parse_int(None) is None


def _session(make_monitor, fetchers=None):
    monitor = make_monitor(fetchers)
    return monitor, CommandInterpreter(monitor)


def _saved(tmp_path):
    return json.loads((tmp_path / "settings.json").read_text())


def test_add_keyword_everywhere_autosaves_and_fetches(make_monitor, sink, tmp_path):
    fetchers = fake_fetchers(
        hn=FakeFetcher("hn", {"python": [make_item(source="hn", title="python news", hours_ago=1)]})
    )
    monitor, interpreter = _session(make_monitor, fetchers)

    async def scenario():
        result = await interpreter.execute('+ "python"')
        await monitor.stop()
        return result

    result = run(scenario())

    assert result.changed is True
    assert _saved(tmp_path)["keywords"] == {"reddit": ["python"], "hn": ["python"], "ddg": ["python"]}
    assert fetchers["hn"].calls == ["python"]
    assert any("Keywords updated." in line for line in sink.lines)
    assert any("Fetching for new keywords..." in line for line in sink.lines)
    assert monitor.last_report is not None


def test_remove_keyword_from_one_source(make_monitor, manager, tmp_path):
    monitor, interpreter = _session(make_monitor)
    manager.add_keyword(None, "go")

    async def scenario():
        await interpreter.execute("-hn go")
        await monitor.stop()

    run(scenario())

    assert manager.config.keywords.snapshot() == {"reddit": ["go"], "hn": [], "ddg": ["go"]}
    assert _saved(tmp_path)["keywords"]["hn"] == []


def test_unknown_source_is_rejected_without_saving(make_monitor, manager, sink, tmp_path):
    monitor, interpreter = _session(make_monitor)

    result = run(interpreter.execute("+twitter rust"))

    assert result.changed is False
    assert manager.config.keywords.is_empty()
    assert not (tmp_path / "settings.json").exists()
    assert any("Invalid source: twitter" in line for line in sink.lines)


def test_apostrophe_keyword_is_one_keyword(make_monitor, manager):
    monitor, interpreter = _session(make_monitor)

    async def scenario():
        await interpreter.execute("+hn don't")
        await monitor.stop()

    run(scenario())
    assert manager.config.keywords.for_source("hn") == ["don't"]


def test_keyword_command_without_arguments(make_monitor, manager, sink):
    _, interpreter = _session(make_monitor)
    run(interpreter.execute("+"))
    assert manager.config.keywords.is_empty()
    assert "[red]" in sink.lines[-1]


def test_source_limit_commands(make_monitor, manager, sink, tmp_path):
    _, interpreter = _session(make_monitor)

    run(interpreter.execute("~reddit 2"))
    assert manager.config.limits == {"reddit": 2}
    assert _saved(tmp_path)["limits"] == {"reddit": 2}

    run(interpreter.execute("~reddit abc"))
    assert manager.config.limits == {"reddit": 2}
    assert 'Invalid limit. Use a number or "default". Ex: ~hn 5' in sink.plain()[-1]

    run(interpreter.execute("~reddit default"))
    assert manager.config.limits == {}
    assert _saved(tmp_path)["limits"] == {}


def test_bare_limit_shows_summary(make_monitor, manager, sink):
    _, interpreter = _session(make_monitor)
    manager.set_limit("hn", 4)

    result = run(interpreter.execute("~hn"))

    assert result.changed is False
    text = "\n".join(sink.plain())
    assert "reddit: 10 (global default)" in text
    assert "hn: 4" in text


def test_set_list_and_interval(make_monitor, manager, sink, tmp_path):
    monitor, interpreter = _session(make_monitor)

    async def scenario():
        await interpreter.execute("set list 3")
        await interpreter.execute("set interval 0")
        bad_interval = manager.config.fetch_interval_minutes
        await interpreter.execute("set interval 7")
        running = monitor.timer_running
        await monitor.stop()
        return bad_interval, running

    bad_interval, running = run(scenario())

    assert manager.config.global_limit == 3
    assert bad_interval == 5
    assert manager.config.fetch_interval_minutes == 7
    assert running is True
    assert _saved(tmp_path)["fetchIntervalMinutes"] == 7
    assert any("Usage: set interval <minutes>" in line for line in sink.plain())


def test_invalid_set_command(make_monitor, sink):
    _, interpreter = _session(make_monitor)
    run(interpreter.execute("set colour blue"))
    assert sink.plain()[-1] == "Invalid set command. See 'help'."


def test_save_then_load_by_prefix(make_monitor, manager, tmp_path):
    _, interpreter = _session(make_monitor)
    manager.add_keyword("ddg", "zig")

    run(interpreter.execute("save work.json"))
    manager.config.keywords.replace({})
    result = run(interpreter.execute("load wor"))

    assert result.changed is False
    assert manager.config.keywords.for_source("ddg") == ["zig"]
    assert not (tmp_path / "settings.json").exists()


def test_load_missing_file_reports_error(make_monitor, sink):
    _, interpreter = _session(make_monitor)
    run(interpreter.execute("load nothing"))
    assert sink.plain()[-1] == 'No settings file found starting with "nothing"'


def test_set_default_copies_file(make_monitor, tmp_path):
    _, interpreter = _session(make_monitor)
    (tmp_path / "other.json").write_text('{"fetchIntervalMinutes": 3}')

    run(interpreter.execute("set default other.json"))

    assert (tmp_path / "settings.json").read_text() == '{"fetchIntervalMinutes": 3}'


def test_unknown_command(make_monitor, sink):
    _, interpreter = _session(make_monitor)
    result = run(interpreter.execute("dance now"))
    assert result.changed is False
    assert sink.plain()[-1] == "Unknown command: dance now"


def test_exit_and_quit(make_monitor):
    _, interpreter = _session(make_monitor)
    assert run(interpreter.execute("exit")).exit_requested is True
    assert run(interpreter.execute("QUIT")).exit_requested is True


def test_fetch_while_running_is_reported(make_monitor, sink):
    monitor, interpreter = _session(make_monitor)

    async def scenario():
        monitor.state = CycleState.FETCHING
        await interpreter.execute("fetch")
        monitor.state = CycleState.IDLE

    run(scenario())
    assert sink.plain()[-1] == "A fetch is already in progress."


def test_clear_and_help(make_monitor, sink):
    _, interpreter = _session(make_monitor)
    sink.write("old line")
    run(interpreter.execute("clear"))
    assert "old line" not in sink.lines
    run(interpreter.execute("help"))
    assert len(sink.lines) > 5
