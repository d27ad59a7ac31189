"""Declarative binding of hierarchical configuration onto Python objects.

Target classes declare which members are read from configuration, and the
configurator builds and populates them. Leaf values are converted to the
declared member types; nested objects are built from the configuration
sub-tree under their key, so ``db.pool.size`` lands in
``service.db.pool.size``.

Key Features:
    - Field bindings declared with ``typing.Annotated`` markers
    - Setter bindings declared with decorators
    - Exact, type-directed value conversion with pluggable handlers
    - Bare numeric and boolean types are required, ``Optional`` ones are not
    - Every failure reports the dotted configuration path and target type

Basic Usage:
    >>> from typing import Annotated, Optional
    >>> from appconfigurator.builders import instantiate
    >>> from appconfigurator.domain import Property, Nested
    >>>
    >>> class Database:
    ...     host: Annotated[Optional[str], Property()] = None
    ...     port: Annotated[int, Property()] = 5432
    >>>
    >>> class Service:
    ...     retries: Annotated[int, Property()] = 0
    ...     db: Annotated[Optional[Database], Nested()] = None
    >>>
    >>> service = instantiate({"retries": "3", "db": {"host": "localhost", "port": 6543}}, Service)

The package consists of several modules:
    - builders: The ``instantiate`` entry point
    - domain: ``Property`` and ``Nested`` binding markers
    - engine: Recursive binding of configuration scopes onto objects
    - converters: Property handlers and per-type value converters
    - scanner: Discovery of bound fields and setters
    - descriptors: Uniform handles over fields and setters
    - scope: Configuration sub-trees paired with their dotted path
    - configuration: Configuration protocol and OmegaConf-backed implementation
    - scalars: Width-specific integer and float types
    - errors: Framework-specific exceptions
"""
