"""
Built-in help command.

helper() builds a descriptor that lists the commands an invoker may run, or,
given a command name (or alias), shows that command's usage line, help lines
and aliases. It is what the default empty-line token ("help") points to;
register it like any other descriptor:

    dispatcher.register(helper())
"""
from .context import Context
from .descriptors import DirectCallback, Descriptor
from .faults import Abort, FaultCode


def usage(settings, descriptor, /):
    """“root name <parameters> - description”, skipping empty parts."""
    line = " ".join(filter(None, (settings.name, descriptor.name, descriptor.parameters)))
    if descriptor.description:
        line += " - " + descriptor.description
    return line


def show(context, /):
    settings = context.settings
    commands = context.dispatcher.commands

    if context.args:
        descriptor = commands.lookup(context.args[0])
        if descriptor is None or not descriptor.permitted(context.invoker):
            settings.invalid_command(context)
            raise Abort(code=FaultCode.UNKNOWN_COMMAND)
        context.reply(usage(settings, descriptor))
        for line in descriptor.help:
            context.reply(line)
        if descriptor.aliases:
            context.reply("Aliases: %s", Context.join_nicely(descriptor.aliases))
        return descriptor

    listed = tuple(descriptor for descriptor in commands.reachable() if descriptor.permitted(context.invoker))
    for descriptor in listed:
        context.reply(usage(settings, descriptor))
    return listed


def helper(*, name="help", aliases=("?",), description="Lists commands, or shows the help of one", permission=None):
    return Descriptor(
        name,
        DirectCallback(show),
        aliases=aliases,
        description=description,
        parameters="[command]",
        permission=permission,
        completions="@commands",
    )


__all__ = (
    "helper",
    "usage",
)
