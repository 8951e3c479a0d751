"""Main CLI application using Cyclopts.

Commands run against the database directly through the same DI container
the server uses, one unit of work per command.
"""

import cyclopts

from conducky.cli.commands import db, encryption, server

app = cyclopts.App(
    name="conducky",
    help="Conducky - Code of Conduct incident management",
)

app.command(db.app, name="db")
app.command(encryption.app, name="encryption")
app.command(server.serve, name="serve")
