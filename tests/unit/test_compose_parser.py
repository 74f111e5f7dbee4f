import yaml
import pytest
from mwstack.PARSERS.compose_parser import ComposeParser
from mwstack.BUILDERS.topology import build_topology, BACKING_SERVICES, DEPENDENT_SERVICES
from mwstack.MODELS.scaffold_settings import ScaffoldSettings
from mwstack.MODELS.errors import ManifestError

def test_parse(tmp_path):
    compose_content = {
        'services': {
            'web': {
                'image': 'nginx:latest',
                'ports': ['8080:80'],
                'environment': {
                    'DEBUG': 'true'
                },
                'restart': 'always',
                'depends_on': ['app'],
            },
            'app': {
                'build': {'context': './prod/app'},
                'volumes': ['./web:/var/www/html:ro', 'data:/data'],
                'environment': ['A=1', 'B=${B}'],
            }
        },
        'volumes': {
            'data': {}
        }
    }

    compose_file = tmp_path / "docker-compose.yml"
    with open(compose_file, 'w') as f:
        yaml.dump(compose_content, f, sort_keys=False)

    manifest = ComposeParser().parse(str(compose_file))

    assert manifest.service_names == ['web', 'app']
    assert manifest.services['web'].image == 'nginx:latest'
    assert manifest.services['web'].ports == {80: 8080}
    assert manifest.services['web'].environment['DEBUG'] == 'true'
    assert manifest.services['web'].restart.value == 'always'
    assert manifest.services['app'].build_context == './prod/app'
    assert manifest.services['app'].volumes[0].read_only
    assert manifest.services['app'].environment == {'A': '1', 'B': '${B}'}
    assert manifest.volumes == ['data']
    assert manifest.startup_order() == ['app', 'web']

def test_generated_topology_parses_back():
    manifest = build_topology(ScaffoldSettings(http_port=8080))
    content = yaml.safe_dump(manifest.to_compose(), sort_keys=False)

    parsed = ComposeParser().parse_from_string(content)

    assert parsed == manifest
    assert set(parsed.service_names) == set(BACKING_SERVICES + DEPENDENT_SERVICES)
    assert parsed.services['nginx'].ports == {80: 8080}
    assert parsed.services['db'].environment['MYSQL_PASSWORD'] == '${DB_PASS}'

def test_missing_file(tmp_path):
    with pytest.raises(ManifestError, match="--first-time"):
        ComposeParser().parse(str(tmp_path / "docker-compose.yml"))

def test_dangling_dependency_is_rejected():
    content = "services:\n  php:\n    build: ./php\n    depends_on: [db]\n"
    with pytest.raises(ManifestError, match="undefined service db"):
        ComposeParser().parse_from_string(content)

def test_cyclic_dependency_is_rejected():
    content = (
        "services:\n"
        "  a:\n    image: x\n    depends_on: [b]\n"
        "  b:\n    image: x\n    depends_on: [a]\n"
    )
    with pytest.raises(ManifestError, match="Circular"):
        ComposeParser().parse_from_string(content)

def test_service_needs_exactly_one_build_source():
    with pytest.raises(ManifestError, match="exactly one of image or build"):
        ComposeParser().parse_from_string("services:\n  a:\n    restart: always\n")

def test_invalid_yaml():
    with pytest.raises(ManifestError):
        ComposeParser().parse_from_string("services: [unclosed")
