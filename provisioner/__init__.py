"""
Guacamole Provisioner.

Sets up a baseline Apache Guacamole gateway on a single Docker host:
- Installs, starts and enables Docker
- Optional Docker registry login with credentials from AWS SSM Parameter Store
- Runs the "guacd" backend and "guacamole" frontend containers
- Optional LDAP authentication for the frontend
- Custom login page branding and links via a generated extension bundle

When a run succeeds, Guacamole is listening at "localhost:8080".
"""

__version__ = "1.0.0"
