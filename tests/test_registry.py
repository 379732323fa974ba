"""Tests for command definitions and the command registry."""

import logging
import textwrap
import uuid

import discord
import pytest

from bot.registry import Command, CommandOption, CommandRegistry, CommandSchema
from factories import make_command


def _warnings(caplog):
    return [record.getMessage() for record in caplog.records if record.levelno == logging.WARNING]


class TestSchema:
    """Tests for schema serialization."""

    def test_to_dict(self):
        schema = CommandSchema(
            name="roll",
            description="Roll dice",
            options=(
                CommandOption(name="sides", description="Sides", type=discord.AppCommandOptionType.integer, required=True),
                CommandOption(name="label", description="Label", autocomplete=True),
            ),
        )

        assert schema.to_dict() == {
            "name": "roll",
            "description": "Roll dice",
            "type": 1,
            "options": [
                {"name": "sides", "description": "Sides", "type": 4, "required": True},
                {"name": "label", "description": "Label", "type": 3, "autocomplete": True},
            ],
        }

    def test_nested_subcommands(self):
        group = CommandOption(
            name="admin",
            description="Admin tools",
            type=discord.AppCommandOptionType.subcommand_group,
            options=(CommandOption(name="reset", description="Reset", type=discord.AppCommandOptionType.subcommand),),
        )

        data = group.to_dict()

        assert group.is_subcommand
        assert data["type"] == 2
        assert data["options"] == [{"name": "reset", "description": "Reset", "type": 1}]

    def test_with_name(self):
        schema = CommandSchema(description="x")
        assert schema.with_name("ping").name == "ping"
        assert schema.name == ""


class TestRegister:
    """Tests for CommandRegistry.register() and lookups."""

    def test_register_and_get(self, registry):
        command = make_command("echo")

        assert registry.register(command)
        assert registry.get("echo") is command
        assert registry.get("ECHO") is command
        assert "echo" in registry
        assert len(registry) == 1

    def test_resolve_alias_case_insensitive(self, registry):
        command = make_command("echo", aliases=("e", "Say"))
        registry.register(command)

        assert registry.resolve("echo") is command
        assert registry.resolve("E") is command
        assert registry.resolve("say") is command
        assert registry.get("say") is None

    def test_resolve_unknown_is_silent(self, registry, caplog):
        registry.register(make_command("echo"))

        assert registry.resolve("nothing") is None
        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]

    def test_duplicate_name_keeps_first(self, registry, caplog):
        first = make_command("echo")
        second = make_command("echo")

        assert registry.register(first, source="commands/a.py")
        assert not registry.register(second, source="commands/b.py")

        assert registry.get("echo") is first
        assert any('Duplicate command name "echo" in commands/b.py' in m for m in _warnings(caplog))

    def test_alias_colliding_with_name(self, registry, caplog):
        registry.register(make_command("echo"))

        assert not registry.register(make_command("repeat", aliases=("echo",)))
        assert registry.get("repeat") is None
        assert _warnings(caplog)

    def test_alias_colliding_with_alias(self, registry):
        registry.register(make_command("echo", aliases=("r",)))

        assert not registry.register(make_command("repeat", aliases=("R",)))

    def test_name_colliding_with_alias(self, registry):
        registry.register(make_command("echo", aliases=("repeat",)))

        assert not registry.register(make_command("repeat"))

    @pytest.mark.parametrize(
        "definition",
        [
            None,
            "not a command",
            Command(schema=None, run=lambda ctx: None),
            Command(schema=CommandSchema(name="x"), run=None),
        ],
    )
    def test_invalid_definitions_skipped(self, registry, caplog, definition):
        assert not registry.register(definition, source="commands/x.py")
        assert len(registry) == 0
        assert any("Skipped commands/x.py" in m for m in _warnings(caplog))

    def test_name_falls_back_to_file_stem(self, registry):
        command = Command(schema=CommandSchema(description="d"), run=lambda ctx: None)

        assert registry.register(command, source="commands/Fallback.py")
        assert registry.get("fallback").name == "fallback"

    @pytest.mark.parametrize(
        "schema",
        [
            CommandSchema(name="Ping", description="Mixed case"),
            CommandSchema(name="my cmd", description="Has a space"),
            CommandSchema(name="blank", description=""),
            CommandSchema(name="long", description="x" * 101),
            CommandSchema(name="x" * 33, description="Name too long"),
            CommandSchema(
                name="roll",
                description="Roll dice",
                options=(CommandOption(name="Sides", description="Sides"),),
            ),
            CommandSchema(
                name="admin",
                description="Admin tools",
                options=(
                    CommandOption(
                        name="reset",
                        description="Reset",
                        type=discord.AppCommandOptionType.subcommand,
                        options=(CommandOption(name="target", description=""),),
                    ),
                ),
            ),
            CommandSchema(
                name="many",
                description="Too many options",
                options=tuple(CommandOption(name=f"o{i}", description="Option") for i in range(26)),
            ),
        ],
    )
    def test_schema_rejected_by_discord_is_skipped(self, registry, caplog, schema):
        command = Command(schema=schema, run=lambda ctx: None)

        assert not registry.register(command, source="commands/bad.py")
        assert len(registry) == 0
        assert registry.to_payload() == []
        assert any("Skipped commands/bad.py: invalid schema" in m for m in _warnings(caplog))

    def test_invalid_schema_does_not_affect_others(self, registry):
        registry.register(make_command("echo"))
        registry.register(Command(schema=CommandSchema(name="Bad Name", description="x"), run=lambda ctx: None))

        assert [entry["name"] for entry in registry.to_payload()] == ["echo"]

    def test_file_stem_fallback_is_validated(self, registry):
        command = Command(schema=CommandSchema(description="d"), run=lambda ctx: None)

        assert not registry.register(command, source="commands/two words.py")

    def test_payload(self, registry):
        registry.register(make_command("b"))
        registry.register(make_command("a"))

        assert [entry["name"] for entry in registry.to_payload()] == ["b", "a"]
        assert [command.name for command in registry] == ["b", "a"]


DEFINITION = textwrap.dedent(
    """
    from bot.registry import Command, CommandSchema


    async def run(ctx):
        return "{tag}"


    command = Command(schema=CommandSchema(name="{name}", description="{tag}"), run=run)
    """
)


@pytest.fixture
def command_package(tmp_path, monkeypatch):
    package = f"cmds_{uuid.uuid4().hex}"
    root = tmp_path / package
    (root / "nested").mkdir(parents=True)
    (root / "__init__.py").write_text("")
    (root / "alpha.py").write_text(DEFINITION.format(name="dup", tag="alpha"))
    (root / "beta.py").write_text(DEFINITION.format(name="dup", tag="beta"))
    (root / "noname.py").write_text(DEFINITION.format(name="", tag="noname"))
    (root / "nested" / "gamma.py").write_text(DEFINITION.format(name="gamma", tag="gamma"))
    (root / "shouty.py").write_text(DEFINITION.format(name="Shouty", tag="shouty"))
    (root / "broken.py").write_text("raise RuntimeError('boom')\n")
    (root / "empty.py").write_text("VALUE = 1\n")
    (root / "_private.py").write_text("raise RuntimeError('should not be imported')\n")
    monkeypatch.syspath_prepend(str(tmp_path))
    return tmp_path, package


@pytest.mark.asyncio
async def test_load_from_directory(command_package, caplog):
    base_dir, package = command_package
    registry = CommandRegistry(package, str(base_dir))

    assert await registry.load() is registry

    assert registry.loaded
    assert sorted(command.name for command in registry) == ["dup", "gamma", "noname"]
    assert registry.get("dup").description == "alpha"

    warnings = _warnings(caplog)
    assert any(f'Duplicate command name "dup" in {package}/beta.py' in m for m in warnings)
    assert any(f"Skipped {package}/empty.py" in m for m in warnings)
    assert any(f"Skipped {package}/shouty.py: invalid schema" in m for m in warnings)

    errors = [r.getMessage() for r in caplog.records if r.levelno == logging.ERROR]
    assert any(f"{package}/broken.py" in m for m in errors)
    assert not any("_private" in m for m in errors)


@pytest.mark.asyncio
async def test_load_builtin_commands():
    registry = CommandRegistry()

    await registry.load()

    assert registry.get("help") is not None
    assert registry.get("ping") is not None
    assert registry.resolve("h") is registry.get("help")
