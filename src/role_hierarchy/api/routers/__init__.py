# Router modules; each exposes a module-level `router`.
