"""Stage orchestration, fetch queue and document degradation."""
