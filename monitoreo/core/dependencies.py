from fastapi import Request

# La caché y el almacén se crean en main.crear_app y viven en app.state;
# los tests los sustituyen pasando los suyos a crear_app.

def get_store(request: Request):
    return request.app.state.store

def get_cache(request: Request):
    return request.app.state.cache
