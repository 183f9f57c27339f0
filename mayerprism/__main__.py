from mayerprism.cli.main import app

app(prog_name="mayerprism")
