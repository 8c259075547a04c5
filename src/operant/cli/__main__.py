from operant.cli.app import app

app()
