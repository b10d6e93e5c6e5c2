from chartfeed.cli.main import app

app(prog_name="chartfeed")
