"""Resource services: one thin facade per OSF resource family."""
