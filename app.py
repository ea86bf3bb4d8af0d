"""
Flask Web应用 - ChatLab 聊天记录导入服务
上传导出文件，自动识别格式并返回归一化结果
"""

import logging

# 立即加载 .env 文件
from dotenv import load_dotenv
load_dotenv()

from flask import Flask, jsonify
from flask_cors import CORS
from chatlab.config import Config
from chatlab.chat_import import build_default_registry
from chatlab.web.routes import register_blueprints

# 配置日志
logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def create_app(registry=None):
    """创建 Flask 应用；注册表只在这里构造一次，由各路由共享读取。"""
    app = Flask(__name__)

    # CORS配置
    CORS(app, resources={
        r"/api/*": {
            "origins": "*",
            "methods": ["GET", "POST", "OPTIONS"],
            "allow_headers": ["Content-Type"]
        }
    })

    # 应用配置
    app.config.from_object(Config)
    app.config['MAX_CONTENT_LENGTH'] = Config.MAX_FILE_SIZE_MB * 1024 * 1024 * 2

    if registry is None:
        registry = build_default_registry()
    app.extensions['chat_format_registry'] = registry

    # ============ 错误处理 ============

    @app.errorhandler(400)
    def bad_request(error):
        return jsonify({'success': False, 'error': '请求错误', 'message': str(error)}), 400

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({'success': False, 'error': '资源不存在', 'message': str(error)}), 404

    @app.errorhandler(413)
    def too_large(error):
        return jsonify({'success': False, 'error': '文件过大', 'message': str(error)}), 413

    @app.errorhandler(500)
    def internal_error(error):
        logger.error(f"Internal server error: {error}")
        return jsonify({'success': False, 'error': '服务器错误', 'message': '请稍后重试'}), 500

    register_blueprints(app)
    return app


app = create_app()


# ============ 启动应用 ============

if __name__ == '__main__':
    # 打印配置状态
    Config.print_config_status()

    logger.info(f"Starting Flask app on {Config.HOST}:{Config.PORT}")

    # 启动应用
    app.run(
        host=Config.HOST,
        port=Config.PORT,
        debug=Config.DEBUG,
        use_reloader=False
    )
