from docbot.commands.doc import DocCommand

ALL_COMMANDS = [
    DocCommand,
]
