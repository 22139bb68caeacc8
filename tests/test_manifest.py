"""Test manifest rendering."""
import pytest
from lxml import etree

from upack import manifest
from upack.errors import TemplateLoadFailed, TemplateParseFailed, TemplateRenderFailed

ACTIVITY = "com.unity3d.player.UnityPlayerActivity"
ANDROID_NS = "http://schemas.android.com/apk/res/android"


def _permission_lines(content):
    return [line.strip() for line in content.decode("utf-8").splitlines()
            if "uses-permission" in line]


def test_render_default_without_permissions():
    content = manifest.render_manifest(ACTIVITY)

    assert isinstance(content, bytes)
    assert _permission_lines(content) == []
    assert f'android:name="{ACTIVITY}"'.encode() in content


def test_render_default_with_permissions_in_order():
    perms = ["android.permission.INTERNET", "android.permission.CAMERA"]

    content = manifest.render_manifest(ACTIVITY, perms)

    assert _permission_lines(content) == [
        '<uses-permission android:name="android.permission.INTERNET" />',
        '<uses-permission android:name="android.permission.CAMERA" />',
    ]
    root = etree.fromstring(content)
    names = [el.get(f"{{{ANDROID_NS}}}name") for el in root.iter("uses-permission")]
    assert names == perms


def test_render_custom_template(tmp_path):
    tmpl = tmp_path / "manifest.xml.j2"
    tmpl.write_text(
        '<manifest activity="{{ entry_activity }}">'
        "{% for permission in permissions %}<p>{{ permission }}</p>{% endfor %}"
        "</manifest>\n"
    )

    content = manifest.render_manifest("a.B", ["x"], str(tmpl))

    assert content == b'<manifest activity="a.B"><p>x</p></manifest>\n'


def test_missing_template_file(tmp_path):
    with pytest.raises(TemplateLoadFailed):
        manifest.render_manifest(ACTIVITY, template_path=str(tmp_path / "missing.xml"))


def test_bad_template_syntax(tmp_path):
    tmpl = tmp_path / "broken.xml"
    tmpl.write_text("<manifest>{% for p in permissions %}</manifest>")

    with pytest.raises(TemplateParseFailed):
        manifest.render_manifest(ACTIVITY, template_path=str(tmpl))


def test_undefined_template_variable(tmp_path):
    tmpl = tmp_path / "unknown.xml"
    tmpl.write_text('<manifest package="{{ package_name }}"/>')

    with pytest.raises(TemplateRenderFailed):
        manifest.render_manifest(ACTIVITY, template_path=str(tmpl))


def test_empty_entry_activity():
    with pytest.raises(TemplateRenderFailed):
        manifest.render_manifest("")


def test_render_result_must_be_xml(tmp_path):
    tmpl = tmp_path / "notxml.txt"
    tmpl.write_text("activity={{ entry_activity }}")

    with pytest.raises(TemplateRenderFailed):
        manifest.render_manifest(ACTIVITY, template_path=str(tmpl))
