"""
Traffy Fondue complaints: fetch, reshape, and store.

- `router.py`: HTTP routes
- `dependencies.py`: query parsing and the shared cache handle
- `service.py`: single-page fetches and the paginated ingestion loops
- `conversion.py`: CSV export -> `ComplaintRecord`
- `repository.py`: document collection writes
"""
