"""Render the AndroidManifest.xml that Unity picks up for the plugin.

Templates use Jinja2 syntax. Two names are available to them:

``entry_activity``
    Fully qualified class name of the launcher activity.
``permissions``
    The permission strings in configured order, e.g. iterate with
    ``{% for permission in permissions %}``.
"""
import logging
from typing import Optional, Sequence

import jinja2
from lxml import etree

from .errors import TemplateLoadFailed, TemplateParseFailed, TemplateRenderFailed

logger = logging.getLogger(__name__)

DEFAULT_MANIFEST_TEMPLATE = """<?xml version="1.0" encoding="utf-8"?>
<manifest
    xmlns:android="http://schemas.android.com/apk/res/android"
    package="com.unity3d.player"
    android:installLocation="preferExternal"
    android:versionCode="1"
    android:versionName="1.0">
    <supports-screens
        android:smallScreens="true"
        android:normalScreens="true"
        android:largeScreens="true"
        android:xlargeScreens="true"
        android:anyDensity="true"/>
{%- for permission in permissions %}
    <uses-permission android:name="{{ permission }}" />
{%- endfor %}

    <application
        android:theme="@style/UnityThemeSelector"
        android:icon="@drawable/app_icon"
        android:label="@string/app_name"
        android:debuggable="true">
        <activity android:name="{{ entry_activity }}"
                  android:label="@string/app_name">
            <intent-filter>
                <action android:name="android.intent.action.MAIN" />
                <category android:name="android.intent.category.LAUNCHER" />
            </intent-filter>
            <meta-data android:name="unityplayer.UnityActivity" android:value="true" />
        </activity>
    </application>
</manifest>"""

_env = jinja2.Environment(
    undefined=jinja2.StrictUndefined,
    keep_trailing_newline=True,
    autoescape=True,
)


def load_template_source(path: Optional[str] = None) -> str:
    if not path:
        return DEFAULT_MANIFEST_TEMPLATE
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise TemplateLoadFailed(f"Android manifest template load fail: {path}: {e}") from e


def load_template(path: Optional[str] = None) -> jinja2.Template:
    source = load_template_source(path)
    name = f"Manifest:{path}" if path else "DefaultManifest"
    try:
        return _env.from_string(source)
    except jinja2.TemplateSyntaxError as e:
        raise TemplateParseFailed(f"{name}, line {e.lineno}: {e.message}") from e


def render_manifest(entry_activity: str, permissions: Sequence[str] = (),
                    template_path: Optional[str] = None) -> bytes:
    """Render the manifest and return it as UTF-8 bytes.

    Nothing touches the disk except reading ``template_path``.
    """
    template = load_template(template_path)
    if not entry_activity:
        raise TemplateRenderFailed("Android manifest generate fail: entry activity is empty")
    try:
        text = template.render(entry_activity=entry_activity, permissions=list(permissions))
    except jinja2.TemplateError as e:
        raise TemplateRenderFailed(f"Android manifest generate fail: {e}") from e

    content = text.encode("utf-8")
    try:
        etree.fromstring(content)
    except etree.XMLSyntaxError as e:
        raise TemplateRenderFailed(f"generated Android manifest is not well-formed XML: {e}") from e
    logger.debug("rendered manifest for %s with %d permission(s)", entry_activity, len(permissions))
    return content
