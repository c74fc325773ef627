from boxget.internal.logging import get_logger
from boxget.kernel.contracts import BoxCollection, ResolvedArtifact
from boxget.kernel.errors import BoxAlreadyExists

logger = get_logger(__name__)


def check_duplicate(collection: BoxCollection, resolved: ResolvedArtifact) -> bool:
    """
    Look the resolved box up in the store before anything is downloaded.

    Returns True when an existing box will be overwritten (found, forced).
    With no provider names to ask about, the store's own check on add applies.

    Raises:
        BoxAlreadyExists: if the box exists and force was not requested.
    """
    if not resolved.providers:
        logger.debug("No provider known yet, deferring duplicate check to the store", name=resolved.name)
        return False

    existing = collection.find(resolved.name, list(resolved.providers), resolved.version)
    if existing is None:
        return False

    if not resolved.force:
        raise BoxAlreadyExists(name=resolved.name, version=resolved.version, provider=existing.provider)

    logger.info(
        "Box already installed, overwriting",
        name=resolved.name,
        version=resolved.version,
        provider=existing.provider,
    )
    return True
