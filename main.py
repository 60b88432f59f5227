import logging

from rich.pretty import pprint

from courier import *

__prog__ = "arena"

logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

dispatcher = Dispatcher(Settings(prefix="[arena] "))
dispatcher.register(helper())
dispatcher.register_static_completion("teams", ["red", "blue", "green"])


@dispatcher.command(
    aliases=("g",),
    parameters="<who> <amount>",
    permission="arena.give",
    principal=True,
    completions="@principals 1|10|100",
)
def give(player=PRINCIPAL, who=Resolved(str), amount=Resolved(int), /):
    """Give coins to another player."""
    return "%s gave %s %d coins" % (player.name, who, amount)


@dispatcher.command(parameters="<team> [message]", completions="@teams")
def shout(context=CONTEXT, team=Resolved(str), message=Joined(), /):
    """Shout at a team."""
    context.reply("(%s) %s", team, message or "...")


if __name__ == '__main__':
    steve = ConsolePrincipal("steve", permissions=("arena.give",))
    pprint(dispatcher.dispatch(steve, ""))
    pprint(dispatcher.dispatch(steve, "give alex 10"))
    pprint(dispatcher.dispatch(steve, "g alex ten"))
    pprint(dispatcher.dispatch(ConsoleInvoker(), "give alex 10"))
    pprint(dispatcher.complete(steve, "shout "))
    pprint(dispatcher.complete(steve, "give alex 1"))
    pprint(dispatcher.commands.lookup("g"))
