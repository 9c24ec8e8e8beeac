from pymoq.cli.main import app

app(prog_name="pymoq")
