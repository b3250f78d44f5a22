"""Persistence interfaces package for the gateway.

Defines repository protocols and shared DTOs for threads, messages, model
configurations and encrypted credentials, a Unit of Work abstraction, and
the async collaborator protocols consumed by the orchestrators.
"""

from .repos import (  # noqa: F401
    ConversationStore,
    CredentialRecord,
    ICredentialRepo,
    IMessageRepo,
    IModelRepo,
    IThreadRepo,
    IUnitOfWork,
    ModelCatalog,
    ModelRecord,
    StoredMessage,
    Thread,
    TransactionalConversationStore,
)
