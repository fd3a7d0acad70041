from md2hatena.cli import app

app(prog_name="md2hatena")
