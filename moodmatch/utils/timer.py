import time
from colorama import Fore, Style, init

# Initializes colorama for Windows terminal compatibility
init(autoreset=True)


class ExecutionTimer:
    """
    Context manager that prints how long a step took.
    The finish line turns yellow past `slow_after` seconds and red past `very_slow_after`.
    """

    def __init__(self, step_name: str, slow_after: float = 2.0, very_slow_after: float = 5.0):
        self.step_name = step_name
        self.slow_after = slow_after
        self.very_slow_after = very_slow_after
        self.started_at = 0.0
        self.duration = 0.0

    def __enter__(self):
        self.started_at = time.perf_counter()
        print(f"{Fore.CYAN}⏳ [STARTING] {self.step_name}...{Style.RESET_ALL}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration = time.perf_counter() - self.started_at

        if exc_type is not None:
            print(f"{Fore.RED}❌ [FAILED] {self.step_name} -> {self.duration:.4f} sec ({exc_val}){Style.RESET_ALL}")
            return False

        color = Fore.GREEN
        if self.duration > self.slow_after:
            color = Fore.YELLOW
        if self.duration > self.very_slow_after:
            color = Fore.RED

        print(f"{color}✅ [FINISHED] {self.step_name} -> {self.duration:.4f} sec{Style.RESET_ALL}")
        return False
