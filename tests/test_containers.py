"""
Tests for provisioner.domain.containers.
"""

from provisioner.domain.containers import (
    guacamole_spec,
    guacd_spec,
    ldap_environment,
    start_container,
    teardown_container,
)
from provisioner.domain.orchestrator.base import BindMount


LDAP_KEYS = {
    "LDAP_HOSTNAME",
    "LDAP_PORT",
    "LDAP_USER_BASE_DN",
    "LDAP_USERNAME_ATTRIBUTE",
    "LDAP_CONFIG_BASE_DN",
    "LDAP_GROUP_BASE_DN",
}


class TestSpecs:

    def test_guacd_spec(self, config):
        spec = guacd_spec(config)
        assert spec.name == "guacd"
        assert spec.image == "guacamole/guacd"
        assert spec.mounts == [BindMount(source=str(config.paths.drive), target=str(config.paths.drive))]
        assert spec.ports == {}
        assert spec.links == {}

    def test_guacamole_spec(self, config):
        spec = guacamole_spec(config)
        assert spec.name == "guacamole"
        assert spec.image == "guacamole/guacamole"
        assert spec.links == {"guacd": "guacd"}
        assert spec.ports == {"8080/tcp": 8080}
        assert spec.mounts == [BindMount(source=str(config.paths.home), target="/guac-home")]
        assert spec.environment["GUACAMOLE_HOME"] == "/guac-home"
        assert LDAP_KEYS <= set(spec.environment)

    def test_custom_images(self, make_config):
        config = make_config(images={"guacamole": "my/guac:2", "guacd": "my/guacd:2"})
        assert guacd_spec(config).image == "my/guacd:2"
        assert guacamole_spec(config).image == "my/guac:2"


class TestLdapEnvironment:

    def test_disabled_is_empty(self, config):
        env = ldap_environment(config.ldap)
        assert set(env) == LDAP_KEYS
        assert all(value == "" for value in env.values())

    def test_enabled(self, make_config):
        config = make_config(ldap={
            "hostname": "ldap.example.com",
            "domain_dn": "DC=example,DC=com",
            "group_base": "OU=Roles",
            "user_attribute": "uid",
            "port": 636,
        })
        assert ldap_environment(config.ldap) == {
            "LDAP_HOSTNAME": "ldap.example.com",
            "LDAP_PORT": "636",
            "LDAP_USER_BASE_DN": "CN=Users,DC=example,DC=com",
            "LDAP_USERNAME_ATTRIBUTE": "uid",
            "LDAP_CONFIG_BASE_DN": "CN=GuacConfigGroups,DC=example,DC=com",
            "LDAP_GROUP_BASE_DN": "OU=Roles,DC=example,DC=com",
        }


class TestTeardownAndStart:

    def test_teardown_fresh_host(self, fake_orchestrator):
        teardown_container(fake_orchestrator, "guacd")
        assert fake_orchestrator.calls == []

    def test_start(self, config, fake_orchestrator):
        start_container(fake_orchestrator, guacd_spec(config))
        assert fake_orchestrator.calls == [("run", "guacd")]
        assert fake_orchestrator.running() == ["guacd"]

    def test_running_container_stopped_and_removed(self, config, fake_orchestrator):
        spec = guacd_spec(config)
        first = start_container(fake_orchestrator, spec)

        teardown_container(fake_orchestrator, "guacd")
        second = start_container(fake_orchestrator, spec)

        assert first != second
        assert fake_orchestrator.calls[1:] == [("stop", "guacd"), ("remove", "guacd"), ("run", "guacd")]
        assert fake_orchestrator.running() == ["guacd"]

    def test_stopped_container_only_removed(self, config, fake_orchestrator):
        start_container(fake_orchestrator, guacd_spec(config))
        fake_orchestrator.stop_container("guacd")
        fake_orchestrator.calls.clear()

        teardown_container(fake_orchestrator, "guacd")

        assert fake_orchestrator.calls == [("remove", "guacd")]
        assert not fake_orchestrator.exists("guacd")
