"""Core domain logic: exceptions, attachment policy and change events."""
