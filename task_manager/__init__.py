"""Task Manager API: task lifecycle service over a relational store."""
