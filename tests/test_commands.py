from __future__ import annotations

import asyncio
import logging
import typing

import pytest
import voltgate
from voltgate.ext import commands

PARSER = voltgate.Parser()


def message(content: str, *, author: str = 'u1', id: str = 'm1') -> voltgate.Message:
    return PARSER.parse_message({'_id': id, 'channel': 'c1', 'author': author, 'content': content})


class FakeHTTP:
    def __init__(self) -> None:
        self.sent: list[tuple[str, str | None, dict[str, typing.Any]]] = []

    async def send_message(self, channel: str, content: str | None = None, **kwargs: typing.Any) -> voltgate.Message:
        self.sent.append((channel, content, kwargs))
        return message(content or '', author='bot', id=f'sent{len(self.sent)}')

    @property
    def contents(self) -> list[str | None]:
        return [content for _, content, _ in self.sent]


def make_context(content: str) -> commands.Context:
    manager = commands.CommandManager(FakeHTTP(), prefixes='!')  # type: ignore
    return commands.Context(
        manager=manager,
        message=message(content),
        shard=voltgate.Shard('token'),
        view=commands.StringView(content),
    )


def make_manager(**kwargs: typing.Any) -> tuple[commands.CommandManager, FakeHTTP]:
    http = FakeHTTP()
    kwargs.setdefault('prefixes', '!')
    manager = commands.CommandManager(http, **kwargs)  # type: ignore

    @manager.command(
        aliases=['plus'],
        options=[commands.Integer('a', required=True), commands.Integer('b', required=True)],
    )
    async def add(ctx: commands.Context) -> None:
        """Adds two numbers."""
        await ctx.reply(str(ctx.get('a') + ctx.get('b')))

    @manager.command(options=[commands.String('text', raw=True)])
    def echo(ctx: commands.Context) -> None:
        ctx.http.sent.append((ctx.channel_id, ctx.get('text', ''), {}))  # type: ignore

    return manager, http


# StringView


@pytest.mark.parametrize(
    ('text', 'expected', 'rest'),
    [
        ('hello world', 'hello', ' world'),
        ('"hello world" x', 'hello world', ' x'),
        ('«a b» c', 'a b', ' c'),
        ('「a b」', 'a b', ''),
        ("it's", "it's", ''),
        ("'a b'", 'a b', ''),
        ('"a \\" b"', 'a " b', ''),
        ('a\\"b', 'a"b', ''),
        ('a\\nb', 'a\\nb', ''),
        ('a\\\\b', 'a\\b', ''),
        ('"a\\\nb"', 'a\nb', ''),
    ],
)
def test_get_quoted_word(text, expected, rest):
    view = commands.StringView(text)
    assert view.get_quoted_word() == expected
    assert view.read_rest() == rest


def test_get_quoted_word_at_eof():
    view = commands.StringView('')
    assert view.get_quoted_word() is None


def test_get_quoted_word_errors():
    with pytest.raises(commands.ExpectedClosingQuoteError) as exc_info:
        commands.StringView('"abc').get_quoted_word()
    assert exc_info.value.close_quote == '"'

    with pytest.raises(commands.InvalidEndOfQuotedStringError) as exc_info:
        commands.StringView('"abc"x').get_quoted_word()
    assert exc_info.value.received == 'x'

    with pytest.raises(commands.UnexpectedQuoteError) as exc_info:
        commands.StringView('ab"c').get_quoted_word()
    assert exc_info.value.quote == '"'

    with pytest.raises(commands.DisallowedEscape) as exc_info:
        commands.StringView('"a\\\nb"').get_quoted_word(disallow_newlines=True)
    assert exc_info.value.which == 'newlines'


def test_view_cursor():
    view = commands.StringView('  ab cd')
    assert view.skip_ws()
    assert not view.skip_ws()
    assert view.current == 'a'
    assert view.get_word() == 'ab'
    view.undo()
    assert view.get_word() == 'ab'
    assert view.skip_string(' c')
    assert not view.skip_string('x')
    assert view.get() == 'd'
    assert view.get() is None
    assert view.eof


# Options


def test_integer_option():
    ctx = make_context('12 -3 ff')
    assert commands.Integer('a').parse(ctx) == 12
    assert commands.Integer('b').parse(ctx) == -3
    assert commands.Integer('c', base=16).parse(ctx) == 255
    assert commands.Integer('d').parse(ctx) is voltgate.UNDEFINED

    with pytest.raises(commands.OptionRequired) as exc_info:
        commands.Integer('e', required=True).parse(ctx)
    assert exc_info.value.name == 'e'


def test_integer_option_rejects_bad_values():
    ctx = make_context('abc')
    with pytest.raises(commands.BadArgument) as exc_info:
        commands.Integer('n').parse(ctx)
    assert exc_info.value.argument == 'abc'
    assert ctx.view.get_word() == 'abc'

    ctx = make_context('256 -1')
    option = commands.Integer('n', signed=False, bits=8)
    assert (option.min_value, option.max_value) == (0, 255)
    with pytest.raises(commands.BadArgument):
        option.parse(ctx)
    assert ctx.view.get_word() == '256'

    option = commands.Integer('n', bits=8)
    assert (option.min_value, option.max_value) == (-128, 127)
    assert option.parse(ctx) == -1


def test_string_option():
    ctx = make_context('"a b" c')
    assert commands.String('s').parse(ctx) == 'a b'
    assert commands.String('t').parse(ctx) == 'c'
    assert commands.String('u').parse(ctx) is voltgate.UNDEFINED

    ctx = make_context('  rest of  input ')
    assert commands.String('s', raw=True).parse(ctx) == 'rest of  input '

    ctx = make_context('""')
    with pytest.raises(commands.OptionRequired):
        commands.String('s', required=True).parse(ctx)

    ctx = make_context('"a\nb"')
    with pytest.raises(commands.BadArgument):
        commands.String('s', disallow_newlines=True).parse(ctx)


def test_greedy_option():
    ctx = make_context('1 2 3 x')
    assert commands.Greedy(commands.Integer('n')).parse(ctx) == [1, 2, 3]
    assert commands.String('rest').parse(ctx) == 'x'

    ctx = make_context('x')
    assert commands.Greedy(commands.Integer('n')).parse(ctx) == []
    with pytest.raises(commands.OptionRequired):
        commands.Greedy(commands.Integer('n', required=True)).parse(ctx)
    assert ctx.view.get_word() == 'x'


def test_parse_options_skips_absent_values():
    ctx = make_context('5')
    command = commands.Command(lambda ctx: None, name='x', options=[commands.Integer('a'), commands.Integer('b')])
    command.parse_options(ctx)
    assert ctx.options == {'a': 5}
    assert ctx.get('b', 0) == 0


# Commands


def test_command_description_from_docstring():
    manager, _ = make_manager()
    add = manager.get_command('add')
    assert add is not None
    assert add.description == 'Adds two numbers.'
    assert manager.get_command('plus') is add
    assert manager.get_command('echo').description == ''  # type: ignore


def test_command_decorator():
    @commands.command(name='ping', aliases=['p'])
    async def ping_command(ctx: commands.Context) -> None:
        pass

    assert isinstance(ping_command, commands.Command)
    assert ping_command.name == 'ping'

    with pytest.raises(TypeError):
        commands.command()(ping_command)  # type: ignore

    manager = commands.CommandManager(FakeHTTP(), prefixes='!', commands=[ping_command])  # type: ignore
    assert manager.commands == [ping_command]


def test_registration_conflicts():
    manager, _ = make_manager()

    with pytest.raises(commands.CommandRegistrationError) as exc_info:
        manager.add_command(commands.Command(lambda ctx: None, name='add'))
    assert exc_info.value.name == 'add'
    assert not exc_info.value.alias_conflict

    with pytest.raises(commands.CommandRegistrationError) as exc_info:
        manager.add_command(commands.Command(lambda ctx: None, name='sum', aliases=['plus']))
    assert exc_info.value.name == 'plus'
    assert exc_info.value.alias_conflict
    # nothing was registered
    assert manager.get_command('sum') is None


def test_remove_command():
    manager, _ = make_manager()
    add = manager.get_command('add')

    assert manager.remove_command('plus') is add
    assert manager.get_command('plus') is None
    assert manager.get_command('add') is add

    manager.add_command(commands.Command(lambda ctx: None, name='plus'))
    assert manager.remove_command('add') is add
    assert manager.get_command('add') is None
    assert manager.get_command('plus') is not None
    assert manager.remove_command('add') is None


@pytest.mark.asyncio
async def test_process_commands():
    manager, http = make_manager()
    shard = voltgate.Shard('token')

    await manager.process_commands(message('!add 1 2'), shard)
    await manager.process_commands(message('!plus  40  2'), shard)
    await manager.process_commands(message('!echo hello  world'), shard)
    assert http.contents == ['3', '42', 'hello  world']

    channel, _, kwargs = http.sent[0]
    assert channel == 'c1'
    assert [r.build() for r in kwargs['replies']] == [{'id': 'm1', 'mention': False}]


@pytest.mark.asyncio
@pytest.mark.parametrize('content', ['add 1 2', '!', '! add 1 2', '!unknown', '', '?add 1 2'])
async def test_messages_that_are_not_commands(content):
    manager, http = make_manager()
    await manager.process_commands(message(content), voltgate.Shard('token'))
    assert http.sent == []


@pytest.mark.asyncio
async def test_get_context():
    manager, _ = make_manager(prefixes=['!!', '!'])
    ctx = await manager.get_context(message('!!add 1 2'), voltgate.Shard('token'))
    assert ctx is not None
    assert ctx.prefix == '!!'
    assert ctx.label == 'add'
    assert ctx.author_id == 'u1'
    assert ctx.view.read_rest() == ' 1 2'


@pytest.mark.asyncio
async def test_callable_prefixes():
    async def prefixes(message: voltgate.Message) -> list[str]:
        return ['?'] if message.author_id == 'u2' else ['!']

    manager, http = make_manager(prefixes=prefixes)
    shard = voltgate.Shard('token')

    await manager.process_commands(message('?add 1 1', author='u2'), shard)
    await manager.process_commands(message('?add 1 1'), shard)
    await manager.process_commands(message('!add 2 2'), shard)
    assert http.contents == ['2', '4']


@pytest.mark.asyncio
async def test_global_check():
    manager, http = make_manager(global_check=lambda ctx: ctx.author_id != 'banned')
    shard = voltgate.Shard('token')

    await manager.process_commands(message('!add 1 2', author='banned'), shard)
    assert http.sent == []
    await manager.process_commands(message('!add 1 2'), shard)
    assert http.contents == ['3']


@pytest.mark.asyncio
async def test_error_handler():
    errors: list[commands.CommandError] = []

    async def on_error(ctx: commands.Context, error: commands.CommandError) -> None:
        errors.append(error)

    manager, http = make_manager(error_handler=on_error)

    @manager.command()
    def fail(ctx: commands.Context) -> None:
        raise RuntimeError('boom')

    shard = voltgate.Shard('token')
    await manager.process_commands(message('!add x 2'), shard)
    await manager.process_commands(message('!add 1'), shard)
    await manager.process_commands(message('!fail'), shard)

    assert [type(e) for e in errors] == [commands.BadArgument, commands.OptionRequired, commands.CommandInvokeError]
    assert isinstance(errors[2], commands.CommandInvokeError)
    assert isinstance(errors[2].original, RuntimeError)
    assert http.sent == []


@pytest.mark.asyncio
async def test_unhandled_errors_are_logged(caplog):
    manager, _ = make_manager()

    @manager.command()
    def fail(ctx: commands.Context) -> None:
        raise RuntimeError('boom')

    with caplog.at_level(logging.DEBUG, logger='voltgate.ext.commands'):
        await manager.process_commands(message('!fail'), voltgate.Shard('token'))
        await manager.process_commands(message('!add x 1'), voltgate.Shard('token'))

    records = [r for r in caplog.records if r.name == 'voltgate.ext.commands.core']
    assert [r.levelno for r in records] == [logging.ERROR, logging.DEBUG]
    assert records[0].exc_info is not None


@pytest.mark.asyncio
async def test_install_on_shard():
    manager, http = make_manager()
    shard = voltgate.Shard('token')

    subscription = manager.install(shard)
    assert manager.install(shard) is subscription
    assert manager.installed

    shard.handle({'type': 'Message', '_id': 'm9', 'channel': 'c1', 'author': 'u1', 'content': '!add 2 3'})

    async def waiter() -> None:
        while not http.sent:
            await asyncio.sleep(0)

    await asyncio.wait_for(waiter(), timeout=1)
    assert http.contents == ['5']
    assert http.sent[0][2]['replies'][0].id == 'm9'

    assert manager.uninstall()
    assert not manager.installed
    assert not manager.uninstall()
