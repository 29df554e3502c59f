# BaseUI
# (generate and check commands, terminal output)
#

import sys
from pathlib import Path

from prompt_toolkit import prompt as prompt_input
from prompt_toolkit.formatted_text import FormattedText
from blessed import Terminal
import pyperclip

from . import pwgen, health
from .charset import ALL_CLASSES
from .fileformat import save_passwords

SEPARATOR = '=' * 50
# suggestions are shown only for passwords below this score
SUGGESTIONS_BELOW_SCORE = 80


class BaseUI:

    #################
    # Other Utility #
    #################

    def _copy(self, text):
        """Wraps copy-to-clipboard function to allow overriding."""
        pyperclip.copy(text)

    def _input(self, prompt):
        """Wraps input function to allow overriding."""
        return input(prompt)

    def _input_pass(self, prompt):
        """Wraps getpass function to allow overriding."""
        return prompt_input(FormattedText([('bold', prompt)]), is_password=True)

    def _ask_yesno(self, prompt) -> bool:
        """Ask `prompt` [Y/n], return answer as bool"""
        ans = self._input(prompt + " [Y/n] ")
        return len(ans) == 0 or ans.lower()[0] == 'y'


class KdguardUI(BaseUI):

    """Commands of the command line tool.

    Generators and analyzer get their data from `context`,
    which is fully loaded before the UI is created.

    """

    def __init__(self, context):
        self._context = context
        self._analyzer = health.StrengthAnalyzer(context.common_passwords)
        self._term = Terminal(stream=sys.stdout)

    ############
    # Generate #
    ############

    def cmd_generate(self, request, count=1, output_file=None, copy=False):
        """Generate `count` passwords, print them or save them to `output_file`."""
        passwords = pwgen.generate_batch(request, self._context, count)
        if output_file is not None and not self._confirm_overwrite(output_file):
            output_file = None
        if output_file is not None:
            path = save_passwords(passwords, output_file)
            print(f"Passwords saved to: {str(path)}")
        else:
            print("Your generated passwords:")
            for password in passwords:
                print(password)
        if copy:
            self._copy(passwords[0])
            print("(first password copied to clipboard)")
        return passwords

    def _confirm_overwrite(self, output_file) -> bool:
        """Ask before replacing existing file. Declined means print instead."""
        path = Path(output_file).expanduser()
        if not path.exists():
            return True
        try:
            return self._ask_yesno(f"File {str(path)!r} exists. Overwrite?")
        except (KeyboardInterrupt, EOFError):
            print()
            return False

    #########
    # Check #
    #########

    def cmd_check(self, password=None, detailed=False):
        if password is None:
            try:
                password = self._input_pass("Password to check: ")
            except (KeyboardInterrupt, EOFError):
                print()
                return None
        result = self._analyzer.analyze(password)
        self.print_analysis(result, detailed)
        return result

    def _rating_color(self, rating):
        term = self._term
        return {
            health.WEAK: term.bold_red,
            health.MEDIUM: term.bold_yellow,
            health.STRONG: term.bold_green,
            health.VERY_STRONG: term.bold_green,
        }.get(rating, term.normal)

    def _flag(self, present):
        term = self._term
        return term.bold_green("yes") if present else term.bold_red("no")

    def print_analysis(self, result, detailed=False):
        term = self._term
        print()
        print(term.bold_cyan("Password Health Check"))
        print(SEPARATOR)
        print(f"Rating: {self._rating_color(result.rating)(result.rating)} "
              f"({result.total}/100 points)")
        print(f"Length: {result.length} characters")
        if detailed:
            print()
            print(term.bold_yellow("Detailed analysis:"))
            print(f"  Length score:     {result.length_score}/25")
            print(f"  Diversity score:  {result.diversity_score}/30")
            print(f"  Complexity score: {result.complexity_score}/25")
            print(f"  Entropy score:    {result.entropy_score}/20")
            print(f"  Entropy:          {result.entropy:.2f} bits")
            print()
            print(term.bold_yellow("Character classes:"))
            for cls in ALL_CLASSES:
                print(f"  {cls.label:<8} {self._flag(result.has_class(cls))}")
            if result.warnings:
                print()
                print(term.bold_red("Warnings:"))
                for warning in result.warnings:
                    print(f"  ! {warning}")
            if result.suggestions and result.total < SUGGESTIONS_BELOW_SCORE:
                print()
                print(term.bold_yellow("Suggestions:"))
                for suggestion in result.suggestions:
                    print(f"  * {suggestion}")
        print(SEPARATOR)
