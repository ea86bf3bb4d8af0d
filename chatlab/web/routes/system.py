from flask import Blueprint, current_app, jsonify

from chatlab.config import Config


bp = Blueprint('system', __name__)


@bp.route('/api/system/info', methods=['GET'])
def system_info():
    """获取系统信息"""
    return jsonify({
        'success': True,
        'app_name': 'ChatLab 聊天记录导入',
        'version': '1.0.0',
        'flask_host': Config.HOST,
        'flask_port': Config.PORT,
        'max_file_size_mb': Config.MAX_FILE_SIZE_MB,
        'file_encoding': Config.FILE_ENCODING,
        'timestamp_mode': Config.TIMESTAMP_MODE,
        'format_count': len(current_app.extensions['chat_format_registry']),
        'config_issues': Config.validate_config(),
    })
