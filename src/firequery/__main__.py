from firequery.cli import app

app(prog_name="firequery")
