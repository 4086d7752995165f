"""
Tests for activation file generation
"""
import pytest

from agentenv.environment import EnvironmentMaterializer, atomic_write, ps_single_quoted, sh_double_quoted
from agentenv.layout import InstallRoot


class TestMaterializer:

    def test_writes_both_files(self, root):
        written = EnvironmentMaterializer(root).write()

        assert written == [root.env_sh, root.env_ps1]
        assert root.env_sh.is_file()
        assert root.env_ps1.is_file()

    def test_sh_templated_with_root(self, root):
        EnvironmentMaterializer(root).write()

        content = root.env_sh.read_text()
        assert f'export AGENTS_HOME="{root.path}"' in content
        assert 'export PATH="$AGENTS_HOME/venv/bin:$AGENTS_HOME/bin:$PATH"' in content
        assert 'export UV_PYTHON_INSTALL_DIR="$AGENTS_HOME/python"' in content
        assert 'export FNM_DIR="$AGENTS_HOME/fnm"' in content
        assert 'eval "$(fnm env)"' in content

    def test_ps1_templated_with_root(self, root):
        EnvironmentMaterializer(root).write()

        content = root.env_ps1.read_text()
        assert f"$env:AGENTS_HOME = '{root.path}'" in content
        assert "venv\\Scripts" in content
        assert 'Invoke-Expression' in content

    def test_overwritten_every_run(self, root):
        root.path.mkdir(parents=True)
        root.env_sh.write_text('stale')

        EnvironmentMaterializer(root).write()

        assert 'stale' not in root.env_sh.read_text()

    def test_no_temp_files_left(self, root):
        EnvironmentMaterializer(root).write()
        EnvironmentMaterializer(root).write()

        assert sorted(p.name for p in root.path.iterdir()) == ['env.ps1', 'env.sh']

    def test_source_lines(self, root):
        materializer = EnvironmentMaterializer(root)

        assert materializer.sh_source_line() == f'. "{root.env_sh}"'
        assert materializer.ps1_source_line() == f". '{root.env_ps1}'"

    def test_special_characters_quoted(self, tmp_path):
        root = InstallRoot.at(tmp_path / 'we$ird "dir"')

        content = EnvironmentMaterializer(root).render_sh()

        assert 'we\\$ird \\"dir\\"' in content


class TestQuoting:

    def test_sh(self):
        assert sh_double_quoted('a"b$c`d\\e') == 'a\\"b\\$c\\`d\\\\e'

    def test_ps(self):
        assert ps_single_quoted("it's") == "it''s"

    def test_atomic_write_creates_parent(self, tmp_path):
        target = tmp_path / 'new' / 'file.txt'

        atomic_write(target, 'hello\n')

        assert target.read_text() == 'hello\n'

    def test_failed_write_leaves_no_staging_file(self, tmp_path):
        target = tmp_path / 'env.sh'

        # Lone surrogates cannot be encoded as UTF-8
        with pytest.raises(UnicodeEncodeError):
            atomic_write(target, 'export X="\ud800"\n')

        assert list(tmp_path.iterdir()) == []

    def test_failed_rename_leaves_no_staging_file(self, tmp_path, monkeypatch):
        target = tmp_path / 'env.sh'

        def refuse(src, dst):
            raise OSError('Permission denied')

        monkeypatch.setattr('agentenv.environment.os.replace', refuse)

        with pytest.raises(OSError, match='Permission denied'):
            atomic_write(target, 'hello\n')

        assert list(tmp_path.iterdir()) == []
