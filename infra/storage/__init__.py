from .atomic_persister import AtomicPersister

__all__ = ["AtomicPersister"]
