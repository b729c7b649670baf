from file_dupes.cli import run

run()
