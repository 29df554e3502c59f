from importlib import import_module

# each symbol must be provided by one of the backends
# noinspection PyUnresolvedReferences
__all__ = (
    # KDF
    'hkdf_sha256',
    # utility
    'randombytes',
)

# ordered by priority, the first one providing a function will be picked
all_backend_names = ('pyca', 'pynacl', 'standard')

symbol_provided_by = {
    'hkdf_sha256': ('pyca',),
    'randombytes': ('pynacl', 'standard'),
}

available_backends = ()
for backend_name in all_backend_names:
    try:
        available_backends += (import_module('.' + backend_name, __name__),)
    except ImportError:
        pass
del backend_name


class MissingError(RuntimeError):

    def __init__(self, msg):
        RuntimeError.__init__(self, msg)


class MissingSurrogate:

    def __init__(self, name, backends):
        self._name, self._backends = name, backends

    def _missing(self):
        libs = (BACKEND_DISTRIBUTIONS.get(b, b) for b in self._backends)
        raise MissingError(f"Missing {self._name}. Please install {' or '.join(libs)}.")

    def __getattr__(self, item):
        self._missing()

    def __call__(self, *args, **kwargs):
        self._missing()


# name of the package to install for each backend
BACKEND_DISTRIBUTIONS = {
    'pyca': 'cryptography',
    'pynacl': 'PyNaCl',
}


def backend_for(name):
    """Return the module name of the backend providing `name`, or None."""
    provided_by_backends = symbol_provided_by[name]
    for backend in available_backends:
        backend_name = backend.__name__.split('.')[-1]
        if backend_name in provided_by_backends:
            return backend_name
    return None


def __getattr__(name):
    if name not in symbol_provided_by:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    provided_by_backends = symbol_provided_by[name]
    for backend in available_backends:
        backend_name = backend.__name__.split('.')[-1]
        if backend_name in provided_by_backends:
            return getattr(backend, name)
    return MissingSurrogate(name, provided_by_backends)
