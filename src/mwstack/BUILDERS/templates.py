"""
Static templates for the generated project: build recipes, proxy config,
mail relay config and the application installer.

Jinja2 placeholders ({{ ... }}) are structural settings resolved when the
project is scaffolded. Shell placeholders (${...}) are runtime values left
for the container platform, the installer or the config renderer.
"""

ENV_EXAMPLE_TEMPLATE = r"""# Site configuration
MW_SITE_NAME=MyWiki
MW_SITE_LANG=en
MW_SITE_URL=http://localhost
MW_SITE_HOST=localhost

# Admin user
MW_ADMIN_USER=admin
MW_ADMIN_PASS=adminpass12@

# Database
DB_NAME=mediawiki
DB_USER=wikiuser
DB_PASS=wikipass
DB_ROOT_PASS=rootpass
DB_HOST=db

# Redis
REDIS_HOST=redis
REDIS_PORT=6379

# Mail/SMTP
MAIL_HOST=smtp.gmail.com
MAIL_PORT=587
MAIL_FROM=wiki@gmail.com
MAIL_USER=wiki@gmail.com
MAIL_PASS=your_app_password

# Scaffold settings (read by --first-time when this file is copied to .env)
HTTP_PORT={{ http_port }}
PARSOID_PORT={{ parsoid_port }}
MW_VERSION={{ mw_version }}
"""

NGINX_CONF_TEMPLATE = r"""events {}
http {
    include       mime.types;
    default_type  application/octet-stream;
    sendfile      on;
    keepalive_timeout  65;

    server {
        listen 80;
        server_name ${MW_SITE_HOST} _;

        root {{ web_root }};

        access_log /var/log/nginx/access.log;
        error_log /var/log/nginx/error.log;

        location / {
            try_files $uri $uri/ /index.php?$query_string;
        }

        location ~ \.php$ {
            include fastcgi_params;
            fastcgi_pass php:{{ php_fpm_port }};
            fastcgi_index index.php;
            fastcgi_param SCRIPT_FILENAME $document_root$fastcgi_script_name;
        }

        location ~* \.(jpg|jpeg|png|gif|css|js|ico|svg|woff|woff2|ttf|eot|otf|mp4|webm|ogg)$ {
            expires 30d;
            access_log off;
        }
    }
}
"""

MSMTP_DOCKERFILE_TEMPLATE = r"""FROM alpine:latest

# Install msmtp and dependencies
RUN apk add --no-cache msmtp gettext ca-certificates

# Render /etc/msmtprc from the template unless a rendered file is mounted
RUN echo '#!/bin/sh' > /entrypoint.sh && \
    echo '[ -s /etc/msmtprc ] || envsubst < /etc/msmtprc.template > /etc/msmtprc' >> /entrypoint.sh && \
    echo 'exec msmtpd' >> /entrypoint.sh && \
    chmod +x /entrypoint.sh

COPY msmtprc.template /etc/msmtprc.template

ENTRYPOINT ["/entrypoint.sh"]
"""

MSMTPRC_TEMPLATE = r"""defaults
auth           on
tls            on
tls_trust_file /etc/ssl/certs/ca-certificates.crt
logfile        /var/log/msmtp.log

account default
host           ${MAIL_HOST}
port           ${MAIL_PORT}
from           ${MAIL_FROM}
auth           on
user           ${MAIL_USER}
password       ${MAIL_PASS}
"""

JOBRUNNER_DOCKERFILE_TEMPLATE = r"""FROM php:{{ php_version }}-cli

RUN apt-get update && apt-get install -y \
    git mariadb-client unzip imagemagick curl netcat-openbsd libonig-dev libicu-dev \
    && docker-php-ext-install mbstring mysqli intl

RUN mkdir -p /usr/local/etc/php && echo "\
display_errors = Off\n\
log_errors = On\n\
error_reporting = E_ALL\n\
error_log = /var/log/php/jobrunner.log\n\
memory_limit = 256M\n\
upload_max_filesize = 100M\n\
post_max_size = 100M\n\
max_execution_time = 60\n" > /usr/local/etc/php/php.ini

WORKDIR {{ web_root }}
"""

PHP_FPM_DOCKERFILE_TEMPLATE = r"""FROM php:{{ php_version }}-fpm

RUN apt-get update && apt-get install -y \
    libicu-dev libjpeg-dev libpng-dev libzip-dev libonig-dev \
    unzip git mariadb-client imagemagick curl netcat-openbsd \
    && docker-php-ext-install intl mbstring zip mysqli opcache gd

RUN curl -sS https://getcomposer.org/installer | php && \
    mv composer.phar /usr/local/bin/composer

RUN mkdir -p /usr/local/etc/php && echo "\
display_errors = Off\n\
log_errors = On\n\
error_reporting = E_ALL\n\
error_log = /var/log/php/php-fpm.log\n\
memory_limit = 256M\n\
upload_max_filesize = 100M\n\
post_max_size = 100M\n\
max_execution_time = 60\n\
" > /usr/local/etc/php/php.ini

RUN echo "listen = 0.0.0.0:{{ php_fpm_port }}" > /usr/local/etc/php-fpm.d/zz-docker.conf

COPY install-mediawiki.sh /install-mediawiki.sh
RUN chmod +x /install-mediawiki.sh

WORKDIR {{ web_root }}
ENTRYPOINT ["/install-mediawiki.sh"]
"""

INSTALL_MEDIAWIKI_TEMPLATE = r"""#!/bin/bash
set -e

WEB_ROOT="{{ web_root }}"
MARKER="$WEB_ROOT/LocalSettings.php"

if [ -f "$MARKER" ]; then
  echo "MediaWiki already installed, skipping setup."
  exec php-fpm
fi

if [ ! -f "$WEB_ROOT/index.php" ]; then
  echo "Downloading MediaWiki {{ mw_version }}..."
  curl -L -o /tmp/mediawiki.tar.gz https://releases.wikimedia.org/mediawiki/{{ mw_branch }}/mediawiki-{{ mw_version }}.tar.gz
  cd /tmp && tar -xzf mediawiki.tar.gz
  cp -a /tmp/mediawiki-{{ mw_version }}/. "$WEB_ROOT/"
  rm -rf /tmp/mediawiki.tar.gz /tmp/mediawiki-{{ mw_version }}
fi

chown -R www-data:www-data "$WEB_ROOT"

echo "Running composer install..."
cd "$WEB_ROOT"
composer install --no-dev || echo "WARNING: composer failed, make sure extensions are properly configured."

# Default fallbacks
: "${MW_SITE_NAME:=MyWiki}"
: "${MW_SITE_LANG:=en}"
: "${MW_SITE_URL:=http://localhost}"
: "${MW_ADMIN_USER:=admin}"
: "${MW_ADMIN_PASS:=adminpass12@}"
: "${DB_NAME:=mediawiki}"
: "${DB_USER:=wikiuser}"
: "${DB_PASS:=wikipass}"
: "${DB_HOST:=db}"
: "${REDIS_HOST:=redis}"
: "${REDIS_PORT:=6379}"

echo "Running install script..."
php maintenance/install.php \
  --dbname "$DB_NAME" \
  --dbuser "$DB_USER" \
  --dbpass "$DB_PASS" \
  --dbserver "$DB_HOST" \
  --lang "$MW_SITE_LANG" \
  --pass "$MW_ADMIN_PASS" \
  "$MW_SITE_NAME" "$MW_ADMIN_USER"

echo "Fixing ownership for $WEB_ROOT..."
chown -R www-data:www-data "$WEB_ROOT"
chmod -R 777 "$WEB_ROOT"
sed -i "s|\$wgScriptPath = .*;|\$wgScriptPath = \"\";|" "$MARKER"

echo "Patching LocalSettings.php..."
mkdir -p "$WEB_ROOT/logs"
chmod 777 "$WEB_ROOT/logs"

# Derive $wgServer from the incoming request instead of a static host
sed -i '/\$wgServer/s|=.*|= "$scheme://$host";|' "$MARKER"
sed -i "/\$wgServer/i \\
\$scheme = isset(\$_SERVER['HTTPS']) && \$_SERVER['HTTPS'] !== 'off' ? 'https' : 'http';\\n\$host = \$_SERVER['HTTP_HOST'];" "$MARKER"

cat << INNER_EOF >> "$MARKER"

// Redis
if (defined('CACHE_REDIS')) {
  \$wgMainCacheType = CACHE_REDIS;
  \$wgSessionCacheType = CACHE_REDIS;
  \$wgParserCacheType = CACHE_REDIS;
  \$wgMessageCacheType = CACHE_REDIS;
  \$wgLockManagers[] = [
    'name' => 'redis-lock-manager',
    'class' => 'RedisLockManager',
    'servers' => [ [ 'host' => '${REDIS_HOST}', 'port' => ${REDIS_PORT} ] ],
    'db' => 0,
    'logLevel' => \Psr\Log\LogLevel::INFO,
  ];
} else {
  \$wgMainCacheType = CACHE_NONE;
  \$wgSessionCacheType = CACHE_NONE;
  \$wgParserCacheType = CACHE_NONE;
  \$wgMessageCacheType = CACHE_NONE;
}

// Email
\$wgSMTP = [
  'host' => "${MAIL_HOST}",
  'IDHost' => "localhost",
  'port' => ${MAIL_PORT},
  'auth' => true,
  'username' => "${MAIL_USER}",
  'password' => "${MAIL_PASS}",
  'from' => "${MAIL_FROM}"
];

// Logging
\$wgDebugLogFile = "\$IP/logs/mediawiki-debug.log";
\$wgDebugToolbar = true;

// VisualEditor + Parsoid
wfLoadExtension('VisualEditor');
\$wgDefaultUserOptions['visualeditor-enable'] = 1;
\$wgVirtualRestConfig['modules']['parsoid'] = [
  'url' => 'http://parsoid:{{ parsoid_port }}',
  'domain' => 'localhost',
  'prefix' => 'localhost'
];

// Path-based routing settings
\$wgScriptPath = "";
\$wgArticlePath = "/wiki/\$1";
\$wgUsePathInfo = true;
INNER_EOF

exec php-fpm
"""

PARSOID_DOCKERFILE_TEMPLATE = r"""FROM node:18-slim

ENV PARSOID_HOME=/opt/parsoid

RUN apt-get update && \
    apt-get install -y git curl && \
    rm -rf /var/lib/apt/lists/*

RUN git clone --depth=1 https://gerrit.wikimedia.org/r/mediawiki/services/parsoid "$PARSOID_HOME"

WORKDIR $PARSOID_HOME

RUN npm install --production

RUN echo "services:" > config.yaml && \
    echo "  - module: lib/index.js" >> config.yaml && \
    echo "    entrypoint: apiServiceWorker" >> config.yaml && \
    echo "    conf:" >> config.yaml && \
    echo "      logging:" >> config.yaml && \
    echo "        level: info" >> config.yaml && \
    echo "      port: {{ parsoid_port }}" >> config.yaml && \
    echo "      localsettings:" >> config.yaml && \
    echo "        domains:" >> config.yaml && \
    echo "          localhost:" >> config.yaml && \
    echo "            host: http://nginx" >> config.yaml && \
    echo "            prefix: localhost" >> config.yaml

EXPOSE {{ parsoid_port }}

CMD ["npm", "start"]
"""
