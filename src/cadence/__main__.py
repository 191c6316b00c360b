from cadence.interface.cli import app

app(prog_name="cadence")
