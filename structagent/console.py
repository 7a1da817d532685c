from __future__ import annotations
from colorama import Fore, Style, just_fix_windows_console

just_fix_windows_console()


class CLIColors:
    """Color utilities for CLI output"""

    @staticmethod
    def success(text: str) -> str:
        return f"{Fore.GREEN}{text}{Style.RESET_ALL}"

    @staticmethod
    def error(text: str) -> str:
        return f"{Fore.RED}{text}{Style.RESET_ALL}"

    @staticmethod
    def warning(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}"

    @staticmethod
    def info(text: str) -> str:
        return f"{Fore.CYAN}{text}{Style.RESET_ALL}"

    @staticmethod
    def highlight(text: str) -> str:
        return f"{Fore.MAGENTA}{Style.BRIGHT}{text}{Style.RESET_ALL}"
