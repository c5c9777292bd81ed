from lokistream.cli import app

app()
