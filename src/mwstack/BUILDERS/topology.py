"""
The fixed service topology of the MediaWiki stack.
"""
from ..MODELS.service_definition import ServiceDefinition, VolumeMount, RestartPolicyCondition
from ..MODELS.stack_manifest import StackManifest
from ..MODELS.scaffold_settings import ScaffoldSettings

DB_SERVICE = "db"
CACHE_SERVICE = "redis"
APP_SERVICE = "php"
PROXY_SERVICE = "nginx"
PARSOID_SERVICE = "parsoid"
MAIL_SERVICE = "msmtp"
JOBRUNNER_SERVICE = "jobrunner"

BACKING_SERVICES = [DB_SERVICE, CACHE_SERVICE]
DEPENDENT_SERVICES = [PROXY_SERVICE, APP_SERVICE, JOBRUNNER_SERVICE, PARSOID_SERVICE, MAIL_SERVICE]

DB_VOLUME = "db_data"

# Variables the application installer reads inside the php container.
INSTALLER_ENV_KEYS = [
    "MW_SITE_NAME", "MW_SITE_LANG", "MW_SITE_URL", "MW_SITE_HOST",
    "MW_ADMIN_USER", "MW_ADMIN_PASS",
    "DB_NAME", "DB_USER", "DB_PASS", "DB_HOST",
    "REDIS_HOST", "REDIS_PORT",
    "MAIL_HOST", "MAIL_PORT", "MAIL_FROM", "MAIL_USER", "MAIL_PASS",
]


def _passthrough(*keys: str) -> dict:
    return {key: "${%s}" % key for key in keys}


def build_topology(settings: ScaffoldSettings) -> StackManifest:
    """
    Builds the stack manifest for the given structural settings.

    :param settings: Ports, paths and versions to bake in.
    :return: The manifest written to docker-compose.yml.
    """
    web_mount = VolumeMount(source="./web", target=settings.web_root)

    services = [
        ServiceDefinition(
            name=DB_SERVICE,
            image="mariadb:10.11",
            restart=RestartPolicyCondition.ALWAYS,
            environment={
                "MYSQL_DATABASE": "${DB_NAME}",
                "MYSQL_USER": "${DB_USER}",
                "MYSQL_PASSWORD": "${DB_PASS}",
                "MYSQL_ROOT_PASSWORD": "${DB_ROOT_PASS}",
            },
            volumes=[VolumeMount(source=DB_VOLUME, target="/var/lib/mysql")],
        ),
        ServiceDefinition(
            name=CACHE_SERVICE,
            image="redis:alpine",
            restart=RestartPolicyCondition.ALWAYS,
        ),
        ServiceDefinition(
            name=APP_SERVICE,
            build_context="./prod/php-fpm",
            volumes=[web_mount],
            depends_on=[DB_SERVICE],
            environment=_passthrough(*INSTALLER_ENV_KEYS),
        ),
        ServiceDefinition(
            name=PROXY_SERVICE,
            image="nginx:latest",
            ports={80: settings.http_port},
            volumes=[
                VolumeMount(source="./prod/nginx/nginx.conf", target="/etc/nginx/nginx.conf", read_only=True),
                VolumeMount(source="./web", target=settings.web_root, read_only=True),
            ],
            depends_on=[APP_SERVICE],
            environment=_passthrough("MW_SITE_HOST"),
        ),
        ServiceDefinition(
            name=PARSOID_SERVICE,
            build_context="./prod/parsoid",
            depends_on=[APP_SERVICE],
        ),
        ServiceDefinition(
            name=MAIL_SERVICE,
            build_context="./prod/msmtp",
            volumes=[VolumeMount(source="./prod/msmtp/msmtprc", target="/etc/msmtprc", read_only=True)],
        ),
        ServiceDefinition(
            name=JOBRUNNER_SERVICE,
            build_context="./prod/jobrunner",
            depends_on=[APP_SERVICE],
            volumes=[web_mount],
        ),
    ]

    return StackManifest(
        services={svc.name: svc for svc in services},
        volumes=[DB_VOLUME],
    )
