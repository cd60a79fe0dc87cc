"""
The MIT License (MIT)

Copyright (c) 2024-present MCausc78

Permission is hereby granted, free of charge, to any person obtaining a
copy of this software and associated documentation files (the "Software"),
to deal in the Software without restriction, including without limitation
the rights to use, copy, modify, merge, publish, distribute, sublicense,
and/or sell copies of the Software, and to permit persons to whom the
Software is furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in
all copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS
OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING
FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER
DEALINGS IN THE SOFTWARE.
"""

from __future__ import annotations

from collections.abc import Iterable
import inspect
import logging
import typing

from voltgate import UNDEFINED, MessageCreateEvent, Reply, utils

from .errors import (
    BadArgument,
    CommandError,
    CommandInvokeError,
    CommandRegistrationError,
    OptionRequired,
    UserInputError,
)
from .view import StringView

if typing.TYPE_CHECKING:
    from collections.abc import Callable

    from voltgate import EventRegistry, HTTPClient, Message, Shard, Subscription

    class _HasEvents(typing.Protocol):
        @property
        def events(self) -> EventRegistry: ...

    CommandCallback = utils.MaybeAwaitableFunc[['Context'], None]
    GlobalCheck = utils.MaybeAwaitableFunc[['Context'], bool]
    ErrorHandler = utils.MaybeAwaitableFunc[['Context', CommandError], None]
    PrefixGetter = utils.MaybeAwaitableFunc[['Message'], Iterable[str]]

_L = logging.getLogger(__name__)


class Option:
    """The base class for command options.

    Subclasses implement :meth:`parse` that consumes the option value from :attr:`Context.view`.

    Attributes
    ----------
    name: :class:`str`
        The option's name. The parsed value is stored in :attr:`Context.options` under this name.
    description: :class:`str`
        The option's description.
    required: :class:`bool`
        Whether the option must be provided.
    """

    __slots__ = (
        'name',
        'description',
        'required',
    )

    def __init__(self, name: str, *, description: str = '', required: bool = False) -> None:
        self.name: str = name
        self.description: str = description
        self.required: bool = required

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} name={self.name!r} required={self.required!r}>'

    def _missing(self) -> typing.Any:
        if self.required:
            raise OptionRequired(name=self.name)
        return UNDEFINED

    def parse(self, ctx: Context, /) -> typing.Any:
        """Consumes the option value.

        Raises
        ------
        UserInputError
            The value is missing or malformed.

        Returns
        -------
        Any
            The parsed value, or :data:`~voltgate.UNDEFINED` if the optional value is absent.
        """
        raise NotImplementedError


class Integer(Option):
    """An integer option.

    Attributes
    ----------
    signed: :class:`bool`
        Whether negative values are allowed.
    base: :class:`int`
        The base the value is written in. Defaults to 10.
    bits: :class:`int`
        The value's width. Values that do not fit raise :exc:`BadArgument`.
    """

    __slots__ = (
        'signed',
        'base',
        'bits',
    )

    def __init__(
        self,
        name: str,
        *,
        description: str = '',
        required: bool = False,
        signed: bool = True,
        base: int = 10,
        bits: int = 64,
    ) -> None:
        super().__init__(name, description=description, required=required)
        self.signed: bool = signed
        self.base: int = base
        self.bits: int = bits

    @property
    def min_value(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def max_value(self) -> int:
        return (1 << (self.bits - 1)) - 1 if self.signed else (1 << self.bits) - 1

    def parse(self, ctx: Context, /) -> typing.Any:
        view = ctx.view
        view.skip_ws()
        word = view.get_word()
        if not word:
            return self._missing()

        try:
            value = int(word, self.base)
        except ValueError:
            view.undo()
            raise BadArgument(argument=word) from None

        if not (self.min_value <= value <= self.max_value):
            view.undo()
            raise BadArgument(
                argument=word,
                message=f'{word!r} is out of range [{self.min_value}, {self.max_value}]',
            )
        return value


class String(Option):
    """A string option.

    Attributes
    ----------
    raw: :class:`bool`
        Whether to consume the rest of input as is, instead of a single, possibly quoted, word.
    disallow_newlines: :class:`bool`
        Whether newlines, escaped or not, are rejected.
    """

    __slots__ = (
        'raw',
        'disallow_newlines',
    )

    def __init__(
        self,
        name: str,
        *,
        description: str = '',
        required: bool = False,
        raw: bool = False,
        disallow_newlines: bool = False,
    ) -> None:
        super().__init__(name, description=description, required=required)
        self.raw: bool = raw
        self.disallow_newlines: bool = disallow_newlines

    def parse(self, ctx: Context, /) -> typing.Any:
        view = ctx.view
        view.skip_ws()
        if view.eof:
            return self._missing()

        if self.raw:
            value = view.read_rest()
        else:
            value = view.get_quoted_word(disallow_newlines=self.disallow_newlines) or ''

        if not value and self.required:
            raise OptionRequired(name=self.name)
        if self.disallow_newlines and '\n' in value:
            raise BadArgument(argument=value, message='Newlines are not allowed')
        return value


class Greedy(Option):
    """Consumes values of wrapped option for as long as they parse.

    The result is a list, possibly empty. The value that failed to parse is left for next option.

    Attributes
    ----------
    option: :class:`Option`
        The wrapped option.
    """

    __slots__ = ('option',)

    def __init__(self, option: Option, /) -> None:
        super().__init__(option.name, description=option.description, required=option.required)
        self.option: Option = option

    def parse(self, ctx: Context, /) -> typing.Any:
        view = ctx.view
        result = []
        while True:
            view.skip_ws()
            if view.eof:
                break
            index = view.index
            try:
                value = self.option.parse(ctx)
            except UserInputError:
                view.index = index
                break
            if value is UNDEFINED:
                break
            result.append(value)

        if not result and self.required:
            raise OptionRequired(name=self.name)
        return result


class Command:
    """Represents a command.

    Attributes
    ----------
    name: :class:`str`
        The command's name.
    aliases: List[:class:`str`]
        The alternative names the command can be invoked with.
    callback: MaybeAwaitableFunc[[:class:`Context`], None]
        The function called when command is invoked.
    description: :class:`str`
        The command's description. Taken from callback's docstring by default.
    options: List[:class:`Option`]
        The options, parsed in order.
    """

    __slots__ = (
        'name',
        'aliases',
        'callback',
        'description',
        'options',
    )

    def __init__(
        self,
        callback: CommandCallback,
        /,
        *,
        name: str | None = None,
        aliases: Iterable[str] = (),
        description: str | None = None,
        options: Iterable[Option] = (),
    ) -> None:
        if description is None:
            doc = getattr(callback, '__doc__', None)
            description = inspect.cleandoc(doc) if doc else ''

        self.name: str = name or callback.__name__
        self.aliases: list[str] = list(aliases)
        self.callback: CommandCallback = callback
        self.description: str = description
        self.options: list[Option] = list(options)

    def __repr__(self) -> str:
        return f'<Command name={self.name!r} aliases={self.aliases!r}>'

    def parse_options(self, ctx: Context, /) -> None:
        """Parses options from context's view into :attr:`Context.options`."""
        for option in self.options:
            value = option.parse(ctx)
            if value is not UNDEFINED:
                ctx.options[option.name] = value

    async def invoke(self, ctx: Context, /) -> None:
        """|coro|

        Parses options and calls the callback.

        Raises
        ------
        UserInputError
            Parsing an option failed.
        CommandInvokeError
            The callback raised an exception.
        """
        ctx.command = self
        self.parse_options(ctx)
        try:
            await utils.maybe_coroutine(self.callback, ctx)
        except CommandError:
            raise
        except Exception as exc:
            raise CommandInvokeError(original=exc) from exc


class Context:
    """Represents the context in which a command is being invoked under.

    Attributes
    ----------
    command: Optional[:class:`Command`]
        The command being invoked.
    label: :class:`str`
        The name used to invoke the command.
    manager: :class:`CommandManager`
        The manager that created this context.
    message: :class:`voltgate.Message`
        The message that triggered the command.
    options: Dict[:class:`str`, Any]
        The parsed option values.
    prefix: :class:`str`
        The prefix used to invoke the command.
    shard: :class:`voltgate.Shard`
        The shard the message arrived on.
    view: :class:`StringView`
        The string view, used to parse command options.
    """

    __slots__ = (
        'command',
        'label',
        'manager',
        'message',
        'options',
        'prefix',
        'shard',
        'view',
    )

    def __init__(
        self,
        *,
        command: Command | None = None,
        label: str = '',
        manager: CommandManager,
        message: Message,
        prefix: str = '',
        shard: Shard,
        view: StringView,
    ) -> None:
        self.command: Command | None = command
        self.label: str = label
        self.manager: CommandManager = manager
        self.message: Message = message
        self.options: dict[str, typing.Any] = {}
        self.prefix: str = prefix
        self.shard: Shard = shard
        self.view: StringView = view

    def __repr__(self) -> str:
        return f'<Context prefix={self.prefix!r} label={self.label!r} command={self.command!r}>'

    @property
    def author_id(self) -> str:
        return self.message.author_id

    @property
    def channel_id(self) -> str:
        return self.message.channel_id

    @property
    def http(self) -> HTTPClient:
        return self.manager.http

    def get(self, name: str, default: typing.Any = None, /) -> typing.Any:
        """Returns the parsed option value.

        Parameters
        ----------
        name: :class:`str`
            The option's name.
        default: Any
            The value to return if the option was not provided.
        """
        return self.options.get(name, default)

    async def send(self, content: str | None = None, **kwargs: typing.Any) -> Message:
        """|coro|

        Sends a message to the channel the command was invoked in.

        Keyword arguments are passed to :meth:`voltgate.HTTPClient.send_message`.
        """
        return await self.manager.http.send_message(self.message.channel_id, content, **kwargs)

    async def reply(self, content: str | None = None, *, mention: bool = False, **kwargs: typing.Any) -> Message:
        """|coro|

        Replies to the message that triggered the command.

        Parameters
        ----------
        content: Optional[:class:`str`]
            The message content.
        mention: :class:`bool`
            Whether to mention the author.
        """
        return await self.manager.http.send_message(
            self.message.channel_id,
            content,
            replies=[Reply(self.message.id, mention)],
            **kwargs,
        )


class CommandManager:
    """Dispatches prefixed messages to commands.

    Parameters
    ----------
    http: :class:`voltgate.HTTPClient`
        The HTTP client used by :meth:`Context.reply`.
    prefixes: Union[Iterable[:class:`str`], MaybeAwaitableFunc[[:class:`voltgate.Message`], Iterable[:class:`str`]]]
        The command prefixes, or a function returning them for a message. The first matching prefix wins.
    global_check: Optional[MaybeAwaitableFunc[[:class:`Context`], :class:`bool`]]
        The check every message must pass before a command is looked up.
    commands: Optional[Iterable[:class:`Command`]]
        The commands to register.
    error_handler: Optional[MaybeAwaitableFunc[[:class:`Context`, :class:`CommandError`], None]]
        Called when a command fails. By default, errors are logged.
    """

    __slots__ = (
        '_subscription',
        'all_commands',
        'error_handler',
        'global_check',
        'http',
        'prefixes',
    )

    def __init__(
        self,
        http: HTTPClient,
        *,
        prefixes: Iterable[str] | PrefixGetter,
        global_check: GlobalCheck | None = None,
        commands: Iterable[Command] | None = None,
        error_handler: ErrorHandler | None = None,
    ) -> None:
        if isinstance(prefixes, str):
            prefixes = [prefixes]
        elif not callable(prefixes):
            prefixes = list(prefixes)

        self._subscription: Subscription[MessageCreateEvent] | None = None
        self.all_commands: dict[str, Command] = {}
        self.error_handler: ErrorHandler | None = error_handler
        self.global_check: GlobalCheck | None = global_check
        self.http: HTTPClient = http
        self.prefixes: list[str] | PrefixGetter = prefixes

        for command in commands or ():
            self.add_command(command)

    def __repr__(self) -> str:
        return f'<CommandManager commands={len(self.commands)} installed={self.installed!r}>'

    @property
    def commands(self) -> list[Command]:
        """List[:class:`Command`]: The unique commands registered."""
        return list({id(c): c for c in self.all_commands.values()}.values())

    @property
    def installed(self) -> bool:
        """:class:`bool`: Whether the manager listens for messages."""
        return self._subscription is not None and self._subscription.active

    def add_command(self, command: Command, /) -> None:
        """Registers a command.

        Raises
        ------
        CommandRegistrationError
            The command name or one of its aliases is already registered.
        """
        if command.name in self.all_commands:
            raise CommandRegistrationError(name=command.name)

        for alias in command.aliases:
            if alias in self.all_commands:
                raise CommandRegistrationError(name=alias, alias_conflict=True)

        self.all_commands[command.name] = command
        for alias in command.aliases:
            self.all_commands[alias] = command

    def remove_command(self, name: str, /) -> Command | None:
        """Removes a command by its name, along with its aliases.

        Returns
        -------
        Optional[:class:`Command`]
            The removed command, if any.
        """
        command = self.all_commands.pop(name, None)
        if command is None:
            return None

        # only the alias is removed
        if name in command.aliases:
            return command

        for alias in command.aliases:
            if self.all_commands.get(alias) is command:
                del self.all_commands[alias]
        return command

    def get_command(self, name: str, /) -> Command | None:
        return self.all_commands.get(name)

    def command(
        self,
        name: str | None = None,
        *,
        aliases: Iterable[str] = (),
        description: str | None = None,
        options: Iterable[Option] = (),
    ) -> Callable[[CommandCallback], Command]:
        """A decorator that creates a :class:`Command` from function and registers it.

        Example
        -------

        .. code-block:: python3

            @manager.command(options=[commands.Integer('a', required=True), commands.Integer('b', required=True)])
            async def add(ctx):
                await ctx.reply(str(ctx.get('a') + ctx.get('b')))
        """

        def decorator(func: CommandCallback, /) -> Command:
            if isinstance(func, Command):
                raise TypeError('Callback is already a command.')
            command = Command(func, name=name, aliases=aliases, description=description, options=options)
            self.add_command(command)
            return command

        return decorator

    def install(self, target: _HasEvents, /) -> Subscription[MessageCreateEvent]:
        """Starts listening for messages on a :class:`voltgate.Client` or :class:`voltgate.Shard`.

        Calling this again while installed returns existing subscription.
        """
        if self._subscription is not None and self._subscription.active:
            return self._subscription
        self._subscription = target.events[MessageCreateEvent].listen(self.handle)
        return self._subscription

    def uninstall(self) -> bool:
        """:class:`bool`: Stops listening for messages. Returns whether the manager was installed."""
        subscription = self._subscription
        self._subscription = None
        return subscription is not None and subscription.delete()

    async def get_prefixes(self, message: Message, /) -> list[str]:
        prefixes = self.prefixes
        if callable(prefixes):
            result = await utils.maybe_coroutine(prefixes, message)
            if isinstance(result, str):
                return [result]
            return list(result)
        return prefixes

    async def get_context(self, message: Message, shard: Shard, /) -> Context | None:
        """|coro|

        Builds the context for message.

        Returns
        -------
        Optional[:class:`Context`]
            The context, or ``None`` if message does not start with a prefix followed by command name.
        """
        view = StringView(message.content or '')

        for prefix in await self.get_prefixes(message):
            if prefix and view.skip_string(prefix):
                break
        else:
            return None

        label = view.get_word()
        if not label:
            return None

        return Context(
            label=label,
            manager=self,
            message=message,
            prefix=prefix,
            shard=shard,
            view=view,
        )

    async def invoke(self, ctx: Context, /) -> None:
        """|coro|

        Looks up and invokes the command. Failures are passed to :meth:`on_error`.
        """
        command = self.all_commands.get(ctx.label)
        if command is None:
            _L.debug('Command %r not found', ctx.label)
            return

        try:
            await command.invoke(ctx)
        except CommandError as exc:
            await self.on_error(ctx, exc)

    async def on_error(self, ctx: Context, error: CommandError, /) -> None:
        if self.error_handler is not None:
            await utils.maybe_coroutine(self.error_handler, ctx, error)
        elif isinstance(error, UserInputError):
            _L.debug('Invalid input for command %s: %s', ctx.label, error)
        else:
            _L.error('Ignoring exception in command %s', ctx.label, exc_info=error)

    async def process_commands(self, message: Message, shard: Shard, /) -> None:
        ctx = await self.get_context(message, shard)
        if ctx is None:
            return

        if self.global_check is not None and not await utils.maybe_coroutine(self.global_check, ctx):
            return

        await self.invoke(ctx)

    async def handle(self, event: MessageCreateEvent, /) -> None:
        await self.process_commands(event.message, event.shard)


def command(
    name: str | None = None,
    *,
    aliases: Iterable[str] = (),
    description: str | None = None,
    options: Iterable[Option] = (),
) -> Callable[[CommandCallback], Command]:
    """A decorator that transforms a function into a :class:`Command`.

    The command must be registered with :meth:`CommandManager.add_command`.
    """

    def decorator(func: CommandCallback, /) -> Command:
        if isinstance(func, Command):
            raise TypeError('Callback is already a command.')
        return Command(func, name=name, aliases=aliases, description=description, options=options)

    return decorator


__all__ = (
    'Option',
    'Integer',
    'String',
    'Greedy',
    'Command',
    'Context',
    'CommandManager',
    'command',
)
