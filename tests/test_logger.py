import io
import tempfile
import unittest
from pathlib import Path

from file_dupes.logger import Logger


class TestLogger(unittest.TestCase):
    def test_stream_output(self):
        stream = io.StringIO()
        with Logger(stream=stream) as log:
            log.log("quiet")
            log.warn("careful")
            log.error("broken")
            log.verbose = True
            log.log("loud")
            self.assertEqual(log.warnings, ["careful"])

        self.assertEqual(stream.getvalue(), "WARNING: careful\nERROR: broken\nloud\n")

        with self.assertRaises(ValueError):
            # Logger is closed.
            log.log("too late")

        with self.assertRaises(TypeError):
            log.verbose = "yes"

    def test_log_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            log_file = Path(tmp, "run.log")
            stream = io.StringIO()
            with self.assertRaises(RuntimeError):
                with Logger(stream=stream, log_file=log_file) as log:
                    log.log("scanning")
                    log.warn("skipped one")
                    raise RuntimeError("boom")

            contents = log_file.read_text(encoding="utf8")
            self.assertIn("START OF LOG", contents)
            self.assertIn("] scanning\n", contents)
            self.assertIn("] WARNING: skipped one\n", contents)
            self.assertIn("RuntimeError: boom", contents)
            self.assertIn("Closing due to uncaught exception.", contents)
            self.assertTrue(contents.rstrip().endswith("END OF LOG"))
            self.assertEqual(stream.getvalue(), "WARNING: skipped one\n")

            with self.assertRaises(FileExistsError):
                # Won't clobber an existing log.
                Logger(log_file=log_file)

            with self.assertRaises(TypeError):
                Logger(log_file=str(log_file))

if __name__ == "__main__":
    unittest.main()
