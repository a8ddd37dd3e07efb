import json
import os
import shutil
import tempfile
import unittest
import sys
from pathlib import Path
from unittest import mock

# Add project root to sys.path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from mdcraft.config import DEFAULT_CONFIG, load_config, save_config


class TestConfig(unittest.TestCase):
    def setUp(self):
        self.test_dir = Path(tempfile.mkdtemp())
        self.config_path = self.test_dir / 'config.json'
        # Drop any MDCRAFT_* variables from the real environment
        clean_env = {k: v for k, v in os.environ.items() if not k.startswith('MDCRAFT_')}
        patcher = mock.patch.dict(os.environ, clean_env, clear=True)
        patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def test_missing_file_gives_defaults(self):
        with self.assertLogs('mdcraft.config', level='WARNING'):
            config = load_config(self.config_path)
        self.assertEqual(config, DEFAULT_CONFIG)

    def test_file_overrides_defaults(self):
        self.config_path.write_text(json.dumps({'history_limit': 10, 'theme': 'dark'}), encoding='utf-8')
        with self.assertLogs('mdcraft.config', level='WARNING') as logs:
            config = load_config(self.config_path)
        self.assertEqual(config['history_limit'], 10)
        self.assertNotIn('theme', config)
        self.assertIn("theme", logs.output[0])

    def test_broken_file_is_logged(self):
        self.config_path.write_text("{not json", encoding='utf-8')
        with self.assertLogs('mdcraft.config', level='ERROR'):
            config = load_config(self.config_path)
        self.assertEqual(config, DEFAULT_CONFIG)

    def test_environment_overrides_file(self):
        save_config({'history_limit': 10}, self.config_path)
        with mock.patch.dict(os.environ, {'MDCRAFT_HISTORY_LIMIT': '25', 'MDCRAFT_DEBUG': 'yes',
                                          'MDCRAFT_LOG_DIR': '/tmp/mdcraft-logs'}):
            config = load_config(self.config_path)
        self.assertEqual(config['history_limit'], 25)
        self.assertIs(config['debug'], True)
        self.assertEqual(config['log_dir'], '/tmp/mdcraft-logs')

    def test_experimental_flag_from_environment(self):
        save_config({}, self.config_path)
        with mock.patch.dict(os.environ, {'MDCRAFT_ENABLE_EXPERIMENTAL': 'true',
                                          'MDCRAFT_TOC_ALIGN_CENTER': '0'}):
            config = load_config(self.config_path)
        self.assertIs(config['enable_experimental'], True)
        self.assertIs(config['toc_align_center'], False)

    def test_invalid_environment_value(self):
        with mock.patch.dict(os.environ, {'MDCRAFT_HISTORY_LIMIT': 'lots'}):
            with self.assertLogs('mdcraft.config', level='ERROR'):
                config = load_config(self.test_dir / 'absent.json')
        self.assertEqual(config['history_limit'], 50)

    def test_save_creates_directories(self):
        target = self.test_dir / 'nested' / 'config.json'
        save_config({'debug': True}, target)
        self.assertEqual(json.loads(target.read_text(encoding='utf-8')), {'debug': True})


if __name__ == '__main__':
    unittest.main()
