import threading
from colorama import init as colorama_init, Fore, Style
from datetime import datetime
colorama_init(autoreset=True)


class Log:
    """Console reporter. One print per line, serialised across workers."""

    def __init__(self, verbose: int = 1):
        self.verbose = verbose
        self.PAY = Fore.MAGENTA
        self._lock = threading.Lock()

    def _time(self):
        return datetime.now().strftime("[%H:%M:%S]")

    def _fmt(self, level: str, color: str):
        return f"{self._time()} {color}[{level}]{Style.RESET_ALL}"

    def _emit(self, line: str):
        with self._lock:
            print(line, flush=True)

    def info(self, msg: str):
        if self.verbose >= 1:
            self._emit(f"{self._fmt('INFO', Fore.CYAN)} {msg}")

    def warn(self, msg: str):
        if self.verbose >= 0:
            self._emit(f"{self._fmt('WARNING', Fore.YELLOW)} {msg}")

    def error(self, msg: str):
        self._emit(f"{self._fmt('ERROR', Fore.RED)} {msg}")

    def ok(self, msg: str):
        self._emit(f"{self._fmt('SUCCESS', Fore.GREEN)} {msg}")

    def fail(self, msg: str):
        self._emit(f"{self._fmt('FAIL', Fore.RED)} {msg}")

    def debug(self, msg: str):
        if self.verbose >= 2:
            self._emit(f"{self._fmt('DEBUG', Fore.MAGENTA)} {msg}")

    def reflected(self, msg: str, payload: str, code: int):
        self._emit(f"{self._fmt('REFLECTED', Fore.RED)} {msg}, "
                   f"replaced with payload {self.PAY}{payload!r}{Style.RESET_ALL} "
                   f"{Style.DIM}(HTTP {code}){Style.RESET_ALL}")
