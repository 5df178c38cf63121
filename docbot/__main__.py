"""Entry point for `python -m docbot`.

    python -m docbot                         run the bot (console + Telegram)
    python -m docbot -index other.json       ... with another index file
    python -m docbot -query String#indexOf   show how one query is answered
"""

import sys


def _query_cmd(text, index_path=None):
    """Run a single query against the index and print the decision."""
    from docbot.commands.doc import DocCommand
    from docbot.commands.source import MessageSource
    from docbot.main import load_index

    index = load_index(index_path)
    command = DocCommand(index)
    source = MessageSource("query", text)
    result = command.handle_query(source, text)

    print(f"> {text}")
    if not result.ok:
        print(f"failure: {result}")
        return
    decision = result.value
    print(f"state: {decision.state}")
    if decision.match is not None:
        print(f"match: {decision.match.qualified_name}")
    for i, name in enumerate(decision.candidates):
        print(f"candidate {i}: {name}")
    for reply in source.replies:
        print(reply.text)
        for row in reply.rows:
            for choice in row:
                print(f"  [{choice.label}] {choice.payload}")


def _option(args, name):
    if name in args:
        i = args.index(name)
        if i + 1 < len(args):
            return args[i + 1], args[:i] + args[i + 2:]
    return None, args


if __name__ == "__main__" or not sys.argv[0]:
    index_path, args = _option(sys.argv[1:], "-index")
    if len(args) >= 2 and args[0] == "-query":
        _query_cmd(" ".join(args[1:]), index_path)
    else:
        from docbot.main import main
        sys.exit(main(index_path))
