import logging

from flask import Blueprint, current_app, jsonify, request

from chatlab.chat_import import FormatError, UnrecognizedFormatError
from chatlab.config import Config


logger = logging.getLogger(__name__)
bp = Blueprint('imports', __name__)


class _BadInput(Exception):
    def __init__(self, message, status=400):
        super().__init__(message)
        self.status = status


def _registry():
    return current_app.extensions['chat_format_registry']


def _read_upload():
    """从请求中取出 (content, filename)。

    支持两种提交方式：
    - multipart/form-data：字段 file
    - application/json：{"filename": "...", "content": "..."}
    """
    upload = request.files.get('file')
    if upload is not None:
        filename = upload.filename or ''
        raw = upload.read()
        size_mb = len(raw) / (1024 * 1024)
        if size_mb > Config.MAX_FILE_SIZE_MB:
            raise _BadInput(f'文件过大 ({size_mb:.2f}MB > {Config.MAX_FILE_SIZE_MB}MB)', 413)
        try:
            content = raw.decode(Config.FILE_ENCODING)
        except UnicodeDecodeError:
            raise _BadInput(f'文件不是 {Config.FILE_ENCODING} 编码的文本')
    else:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            data = {}
        filename = data.get('filename') or ''
        content = data.get('content')
        if not isinstance(content, str):
            raise _BadInput('未提供文件内容')

    if not filename or not isinstance(filename, str):
        raise _BadInput('未指定文件名')
    return content, filename


@bp.route('/api/formats', methods=['GET'])
def get_formats():
    """获取支持的格式列表"""
    formats = _registry().list_supported_formats()
    return jsonify({'success': True, 'formats': formats, 'count': len(formats)})


@bp.route('/api/detect', methods=['POST'])
def detect_format():
    """只检测格式，不解析"""
    try:
        content, filename = _read_upload()
    except _BadInput as e:
        return jsonify({'success': False, 'error': str(e)}), e.status

    return jsonify({'success': True, 'filename': filename, 'format': _registry().detect(content, filename)})


@bp.route('/api/import', methods=['POST'])
def import_chat():
    """识别并解析上传的聊天记录"""
    try:
        content, filename = _read_upload()
    except _BadInput as e:
        return jsonify({'success': False, 'error': str(e)}), e.status

    try:
        parser, result = _registry().dispatch(content, filename)
    except UnrecognizedFormatError as e:
        return jsonify({'success': False, 'error': str(e)}), 415
    except FormatError as e:
        logger.warning(f"Error parsing {filename}: {e}")
        return jsonify({'success': False, 'format': e.format_name, 'error': str(e)}), 422

    return jsonify({
        'success': True,
        'filename': filename,
        'format': parser.name,
        'result': result.to_dict(),
    })
