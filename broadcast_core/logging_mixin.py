import sys
import time


class LoggingMixin:
    def _append_log(self, msg: str) -> None:
        ts = time.strftime("%Y-%m-%d %H:%M:%S")
        line = f"[{ts}] {msg}"
        print(line, flush=True)
        self._write_log_file(line)

    def _write_log_file(self, line: str) -> None:
        try:
            with open(self.config.log_file, "a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError as e:
            # Only complain once; the console still gets every line.
            if not self._log_file_failed:
                self._log_file_failed = True
                print(f"Cannot write activity log {self.config.log_file}: {e}", file=sys.stderr)
