"""
配置管理模块 - 读取和验证环境变量
"""

import os
from dotenv import load_dotenv

# 加载 .env 文件
load_dotenv()


class Config:
    """应用配置类"""

    # Flask配置
    DEBUG = os.getenv('FLASK_DEBUG', 'False').lower() == 'true'
    HOST = os.getenv('FLASK_HOST', '127.0.0.1')
    PORT = int(os.getenv('FLASK_PORT', 5000))

    LOG_LEVEL = os.getenv('CHATLAB_LOG_LEVEL', 'INFO').strip().upper()

    # 导入配置
    MAX_FILE_SIZE_MB = int(os.getenv('CHATLAB_MAX_FILE_SIZE_MB', 500))
    # utf-8-sig 会顺带去掉 Windows 导出文件的 BOM
    FILE_ENCODING = os.getenv('CHATLAB_FILE_ENCODING', 'utf-8-sig')

    # 无时区时间字符串的语义：
    # - utc_to_local: '...Z' / offset 按标准语义，naive 时间按本机时区解释
    # - wysiwyg: 忽略 Z/offset，把字符串里“看到的时间”按 UTC 计算 epoch（不受本机时区影响）
    _TIMESTAMP_MODE_RAW = os.getenv('CHATLAB_TIMESTAMP_MODE', '').strip().lower()
    if _TIMESTAMP_MODE_RAW in ('wysiwyg', 'literal', 'as_is', 'asis', 'no_tz', 'no_timezone'):
        TIMESTAMP_MODE = 'wysiwyg'
    else:
        TIMESTAMP_MODE = 'utc_to_local'

    @classmethod
    def validate_config(cls):
        """验证配置的有效性"""
        issues = []

        if cls.MAX_FILE_SIZE_MB < 1:
            issues.append("❌ CHATLAB_MAX_FILE_SIZE_MB 配置无效")

        if cls.LOG_LEVEL not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            issues.append(f"⚠️  CHATLAB_LOG_LEVEL={cls.LOG_LEVEL} 无法识别，将使用 INFO")

        try:
            'chatlab'.encode(cls.FILE_ENCODING)
        except LookupError:
            issues.append(f"❌ CHATLAB_FILE_ENCODING={cls.FILE_ENCODING} 不是有效编码")

        if cls._TIMESTAMP_MODE_RAW and cls._TIMESTAMP_MODE_RAW != cls.TIMESTAMP_MODE:
            issues.append(f"⚠️  CHATLAB_TIMESTAMP_MODE={cls._TIMESTAMP_MODE_RAW} 已按 {cls.TIMESTAMP_MODE} 处理")

        return issues

    @classmethod
    def print_config_status(cls):
        """打印配置状态"""
        print("\n" + "="*50)
        print("📋 应用配置状态")
        print("="*50)
        print(f"Flask: {cls.HOST}:{cls.PORT} (DEBUG={cls.DEBUG})")
        print(f"日志级别: {cls.LOG_LEVEL}")
        print(f"最大文件: {cls.MAX_FILE_SIZE_MB}MB")
        print(f"文件编码: {cls.FILE_ENCODING}")
        print(f"时间戳模式: {cls.TIMESTAMP_MODE}")

        # 验证并显示问题
        issues = cls.validate_config()
        if issues:
            print("\n⚠️  配置问题:")
            for issue in issues:
                print(f"   {issue}")
        else:
            print("\n✅ 配置全部有效")

        print("="*50 + "\n")


if __name__ == '__main__':
    Config.print_config_status()
