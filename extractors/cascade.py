"""
Cascade de stratégies ordonnées : on tente chaque méthode dans l'ordre et on
s'arrête au premier résultat exploitable.
"""
import logging
from typing import Any, Callable, Iterable, Optional

logger = logging.getLogger(__name__)


def first_satisfying(
    strategies: Iterable[Callable[..., Any]],
    *args,
    accept: Callable[[Any], bool] = lambda result: result is not None,
) -> Optional[Any]:
    """Renvoie le résultat de la première stratégie acceptée, sinon None"""
    for strategy in strategies:
        result = strategy(*args)
        if accept(result):
            logger.debug(f"Stratégie retenue: {strategy.__name__}")
            return result
    return None
