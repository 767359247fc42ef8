"""Directive resolution for the configuration loader."""

from loadconfig.loader.errors import InvalidArgumentsError, UnsupportedDirectiveError
from loadconfig.loader.models import DirectiveAction, DirectiveKeyword, DirectiveOutcome


def resolve_directive(keyword: str, argument: str) -> DirectiveOutcome:
    """Map a parsed directive to the action the loader should take.

    | keyword       | action             | nested mandatory flag |
    |---------------|--------------------|-----------------------|
    | @config       | INFO               | unchanged             |
    | @include      | INCLUDE_OPTIONAL   | False                 |
    | @require      | INCLUDE_MANDATORY  | True                  |
    | @includedir   | INCLUDE_DIRECTORY  | False for each entry  |

    Args:
        keyword: Directive keyword including the @ prefix.
        argument: Raw directive argument.

    Returns:
        The resolved directive outcome.

    Raises:
        UnsupportedDirectiveError: If the keyword is not recognized.
        InvalidArgumentsError: If an include directive has no path.
    """
    try:
        directive = DirectiveKeyword(keyword)
    except ValueError:
        raise UnsupportedDirectiveError(keyword) from None

    if directive is DirectiveKeyword.CONFIG:
        return DirectiveOutcome(action=DirectiveAction.INFO, target=argument)

    if not argument:
        raise InvalidArgumentsError(f"Directive {keyword} requires a path argument")

    if directive is DirectiveKeyword.INCLUDE:
        return DirectiveOutcome(
            action=DirectiveAction.INCLUDE_OPTIONAL, target=argument, required=False
        )
    if directive is DirectiveKeyword.REQUIRE:
        return DirectiveOutcome(
            action=DirectiveAction.INCLUDE_MANDATORY, target=argument, required=True
        )
    return DirectiveOutcome(
        action=DirectiveAction.INCLUDE_DIRECTORY, target=argument, required=False
    )
