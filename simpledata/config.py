CONFIG = {
    'commands': {
        'modules': [
            'simpledata.commands',
        ],
    },
    'components': {
        'adapters': {
            'memory': 'simpledata.adapters.memory:Memory',
            'http': 'simpledata.adapters.http:Http',
        },
    },

    # Adapter used for models registered without an explicit adapter, one of
    # `components.adapters` names.
    'adapter': 'memory',

    # Maximum nesting depth of a single mapping call, deeper payloads are
    # rejected as cycles.
    'max_depth': 100,

    # If True, records fetched by `find` on a cache miss are added to the
    # identity cache.
    'cache_fetched': False,

    'http': {
        'url': None,
        'timeout': 30,
    },
}
