"""Document skeletons for the generated repository metadata.

Templates are keyed by document name; names ending in ``.xml`` are
rendered with XML autoescaping, and their header text goes through the
``xml_text`` filter.
"""

PACKAGES_TEMPLATE = """\
{% for stanza in stanzas %}
{{ stanza.control }}
Filename: {{ stanza.filename }}
Size: {{ stanza.size }}
MD5sum: {{ stanza.md5 }}
SHA1: {{ stanza.sha1 }}
SHA256: {{ stanza.sha256 }}
SHA512: {{ stanza.sha512 }}

{% endfor %}
"""

RELEASE_TEMPLATE = """\
Origin: {{ origin }}
Label: {{ label }}
Suite: {{ suite }}
Codename: {{ codename }}
Date: {{ date }}
Architectures: {{ architecture }}
Components: {{ component }}
{% if description %}
Description: {{ description }}
{% endif %}
MD5Sum:
{% for file in files %}
 {{ file.md5 }} {{ file.size }} {{ file.path }}
{% endfor %}
SHA1:
{% for file in files %}
 {{ file.sha1 }} {{ file.size }} {{ file.path }}
{% endfor %}
SHA256:
{% for file in files %}
 {{ file.sha256 }} {{ file.size }} {{ file.path }}
{% endfor %}
SHA512:
{% for file in files %}
 {{ file.sha512 }} {{ file.size }} {{ file.path }}
{% endfor %}
"""

_DEPENDENCY_ENTRY = (
    '<rpm:entry name="{{ dep.name|xml_text }}"'
    '{% if dep.flags %} flags="{{ dep.flags }}" epoch="{{ dep.epoch }}" ver="{{ dep.version|xml_text }}"'
    '{% if dep.release %} rel="{{ dep.release|xml_text }}"{% endif %}{% endif %}'
    '{% if dep.pre %} pre="1"{% endif %}/>'
)

PRIMARY_TEMPLATE = (
    """\
<?xml version="1.0" encoding="UTF-8"?>
<metadata xmlns="http://linux.duke.edu/metadata/common" \
xmlns:rpm="http://linux.duke.edu/metadata/rpm" packages="{{ packages|length }}">
{% for pkg in packages %}
<package type="rpm">
  <name>{{ pkg.record.name|xml_text }}</name>
  <arch>{{ pkg.record.arch|xml_text }}</arch>
  <version epoch="{{ pkg.record.epoch }}" ver="{{ pkg.record.version|xml_text }}" rel="{{ pkg.record.release|xml_text }}"/>
  <checksum type="sha256" pkgid="YES">{{ pkg.sha256 }}</checksum>
  <summary>{{ pkg.record.summary|xml_text }}</summary>
  <description>{{ pkg.record.description|xml_text }}</description>
  <packager>{{ pkg.record.packager|xml_text }}</packager>
  <url>{{ pkg.record.url|xml_text }}</url>
  <time file="{{ pkg.file_time }}" build="{{ pkg.record.build_time }}"/>
  <size package="{{ pkg.size }}" installed="{{ pkg.record.installed_size }}" archive="{{ pkg.record.archive_size }}"/>
  <location href="{{ pkg.location|xml_text }}"/>
  <format>
    <rpm:license>{{ pkg.record.license|xml_text }}</rpm:license>
    <rpm:vendor>{{ pkg.record.vendor|xml_text }}</rpm:vendor>
    <rpm:group>{{ pkg.record.group|xml_text }}</rpm:group>
    <rpm:buildhost>{{ pkg.record.buildhost|xml_text }}</rpm:buildhost>
    <rpm:sourcerpm>{{ pkg.record.sourcerpm|xml_text }}</rpm:sourcerpm>
{% if pkg.record.provides %}
    <rpm:provides>
{% for dep in pkg.record.provides %}
      """
    + _DEPENDENCY_ENTRY
    + """
{% endfor %}
    </rpm:provides>
{% endif %}
{% if pkg.record.requires %}
    <rpm:requires>
{% for dep in pkg.record.requires %}
      """
    + _DEPENDENCY_ENTRY
    + """
{% endfor %}
    </rpm:requires>
{% endif %}
{% for file in pkg.record.primary_files %}
    <file{% if file.is_directory %} type="dir"{% endif %}>{{ file.path|xml_text }}</file>
{% endfor %}
  </format>
</package>
{% endfor %}
</metadata>
"""
)

FILELISTS_TEMPLATE = """\
<?xml version="1.0" encoding="UTF-8"?>
<filelists xmlns="http://linux.duke.edu/metadata/filelists" packages="{{ packages|length }}">
{% for pkg in packages %}
<package pkgid="{{ pkg.sha256 }}" name="{{ pkg.record.name|xml_text }}" arch="{{ pkg.record.arch|xml_text }}">
  <version epoch="{{ pkg.record.epoch }}" ver="{{ pkg.record.version|xml_text }}" rel="{{ pkg.record.release|xml_text }}"/>
{% for file in pkg.record.files %}
  <file{% if file.is_directory %} type="dir"{% endif %}>{{ file.path|xml_text }}</file>
{% endfor %}
</package>
{% endfor %}
</filelists>
"""

OTHER_TEMPLATE = """\
<?xml version="1.0" encoding="UTF-8"?>
<otherdata xmlns="http://linux.duke.edu/metadata/other" packages="{{ packages|length }}">
{% for pkg in packages %}
<package pkgid="{{ pkg.sha256 }}" name="{{ pkg.record.name|xml_text }}" arch="{{ pkg.record.arch|xml_text }}">
  <version epoch="{{ pkg.record.epoch }}" ver="{{ pkg.record.version|xml_text }}" rel="{{ pkg.record.release|xml_text }}"/>
{% for entry in pkg.record.changelogs %}
  <changelog author="{{ entry.author|xml_text }}" date="{{ entry.date }}">{{ entry.text|xml_text }}</changelog>
{% endfor %}
</package>
{% endfor %}
</otherdata>
"""

REPOMD_TEMPLATE = """\
<?xml version="1.0" encoding="UTF-8"?>
<repomd xmlns="http://linux.duke.edu/metadata/repo" xmlns:rpm="http://linux.duke.edu/metadata/rpm">
  <revision>{{ timestamp }}</revision>
{% for data in entries %}
  <data type="{{ data.data_type }}">
    <checksum type="sha256">{{ data.sha256 }}</checksum>
    <open-checksum type="sha256">{{ data.open_sha256 }}</open-checksum>
    <location href="{{ data.location }}"/>
    <timestamp>{{ timestamp }}</timestamp>
    <size>{{ data.size }}</size>
    <open-size>{{ data.open_size }}</open-size>
  </data>
{% endfor %}
</repomd>
"""

TEMPLATES = {
    "Packages": PACKAGES_TEMPLATE,
    "Release": RELEASE_TEMPLATE,
    "primary.xml": PRIMARY_TEMPLATE,
    "filelists.xml": FILELISTS_TEMPLATE,
    "other.xml": OTHER_TEMPLATE,
    "repomd.xml": REPOMD_TEMPLATE,
}
