"""NextUp: multi-tenant booking backend for barbershops."""
